import logging

from heavylight.__main__ import run_sample


class TestSample:
    """Tests for the sample run"""

    def test_run_sample(self, caplog):
        caplog.set_level(logging.INFO, logger="heavylight")
        hld = run_sample()

        messages = [rec.getMessage() for rec in caplog.records]
        assert "Path sum (4 to 6): 31" in messages
        assert "Path sum (0 to 2): 17" in messages
        assert "Path sum (4 to 6) after update: 121" in messages
        assert "LCA(2, 5): 1" in messages
        assert hld.value(1) == 100

    def test_build_logs_chains(self, caplog):
        caplog.set_level(logging.DEBUG, logger="heavylight.decomposition")
        run_sample()
        assert any("into 3 chains" in rec.getMessage() for rec in caplog.records)
