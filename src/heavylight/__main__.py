"""Run a small decomposition and log some path sums and LCAs"""

import logging

from .decomposition import HeavyLightDecomposition

logger = logging.getLogger("heavylight")

SAMPLE_VALUES = [2, 10, 5, 3, 8, 1, 7]
SAMPLE_EDGES = [(1, 0), (1, 2), (1, 3), (0, 4), (3, 5), (5, 6)]
SAMPLE_ROOT = 1


def run_sample() -> HeavyLightDecomposition:
    hld = HeavyLightDecomposition.from_edges(
        SAMPLE_VALUES, SAMPLE_EDGES, root=SAMPLE_ROOT
    )

    for u, v in ((4, 6), (0, 2), (1, 1)):
        logger.info("Path sum (%d to %d): %s", u, v, hld.query_path(u, v))

    logger.info("Updating node 1 value from %s to 100", hld.value(1))
    hld.update_node_value(1, 100)
    for u, v in ((4, 6), (0, 2)):
        logger.info("Path sum (%d to %d) after update: %s", u, v, hld.query_path(u, v))

    for u, v in ((4, 6), (4, 0), (2, 5)):
        logger.info("LCA(%d, %d): %d", u, v, hld.get_lca(u, v))
    return hld


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    run_sample()


if __name__ == "__main__":
    main()
