"""Tests for the SegmentTree range aggregate."""

import pytest
from heavylight import SegmentTree, AlreadyBuiltError, NotBuiltError


@pytest.fixture
def seg_tree():
    """A built sum tree over [5, 3, 8, 6, 1]"""
    tree = SegmentTree(5)
    tree.build([5, 3, 8, 6, 1])
    return tree


class TestSegmentTreeBuild:
    """Test construction and the one-time build."""

    def test_len(self):
        assert len(SegmentTree(7)) == 7

    def test_size_must_be_positive(self):
        with pytest.raises(ValueError):
            SegmentTree(0)

    def test_build_marks_built(self):
        tree = SegmentTree(3)
        assert not tree.is_built
        tree.build([1, 2, 3])
        assert tree.is_built

    def test_build_empty(self):
        with pytest.raises(ValueError):
            SegmentTree(1).build([])

    def test_build_wrong_length(self):
        with pytest.raises(ValueError):
            SegmentTree(3).build([1, 2])

    def test_build_twice(self, seg_tree):
        with pytest.raises(AlreadyBuiltError):
            seg_tree.build([1, 1, 1, 1, 1])

    def test_use_before_build(self):
        tree = SegmentTree(3)
        with pytest.raises(NotBuiltError):
            tree.query(0, 2)
        with pytest.raises(NotBuiltError):
            tree.update(0, 1)
        with pytest.raises(NotBuiltError):
            tree.total()

    def test_single_position(self):
        tree = SegmentTree(1)
        tree.build([42])
        assert tree.query(0, 0) == 42
        tree.update(0, 7)
        assert tree.total() == 7


class TestSegmentTreeQuery:
    """Test range queries."""

    def test_whole_range(self, seg_tree):
        assert seg_tree.query(0, 4) == 23

    def test_inner_range(self, seg_tree):
        assert seg_tree.query(1, 3) == 17

    def test_single(self, seg_tree):
        for i, val in enumerate([5, 3, 8, 6, 1]):
            assert seg_tree.query(i, i) == val

    def test_every_range(self, seg_tree):
        vals = [5, 3, 8, 6, 1]
        for left in range(5):
            for right in range(left, 5):
                assert seg_tree.query(left, right) == sum(vals[left : right + 1])

    def test_empty_range_is_identity(self, seg_tree):
        assert seg_tree.query(3, 1) == 0

    def test_returns_python_int(self, seg_tree):
        assert type(seg_tree.query(0, 4)) is int
        assert type(seg_tree.total()) is int

    def test_out_of_range(self, seg_tree):
        with pytest.raises(IndexError):
            seg_tree.query(0, 5)
        with pytest.raises(IndexError):
            seg_tree.query(-1, 2)

    def test_total(self, seg_tree):
        assert seg_tree.total() == 23


class TestSegmentTreeUpdate:
    """Test point updates."""

    def test_update_changes_sums(self, seg_tree):
        seg_tree.update(2, 10)
        assert seg_tree.query(0, 4) == 25
        assert seg_tree.query(2, 2) == 10
        assert seg_tree.query(0, 1) == 8
        assert seg_tree.query(3, 4) == 7

    def test_update_out_of_range(self, seg_tree):
        with pytest.raises(IndexError):
            seg_tree.update(5, 1)

    def test_getitem(self, seg_tree):
        assert seg_tree[0] == 5
        assert seg_tree[-1] == 1

    def test_setitem(self, seg_tree):
        seg_tree[-2] = 0
        assert seg_tree[3] == 0
        assert seg_tree.total() == 17

    def test_to_list(self, seg_tree):
        assert seg_tree.to_list() == [5, 3, 8, 6, 1]
        seg_tree.update(4, 9)
        assert seg_tree.to_list() == [5, 3, 8, 6, 9]


class TestSegmentTreeStorage:
    """Test the different kinds of values the tree can hold."""

    def test_floats(self):
        tree = SegmentTree(3)
        tree.build([0.5, 1.5, 2.0])
        assert tree.query(0, 1) == pytest.approx(2.0)
        assert tree.total() == pytest.approx(4.0)

    def test_big_ints(self):
        tree = SegmentTree(2)
        tree.build([2**70, 1])
        assert tree.total() == 2**70 + 1

    def test_custom_combine(self):
        tree = SegmentTree(4, combine=max, identity=float("-inf"))
        tree.build([3, 9, 2, 4])
        assert tree.query(0, 3) == 9
        assert tree.query(2, 3) == 4
        assert tree.query(3, 2) == float("-inf")
        tree.update(1, 0)
        assert tree.total() == 4

    def test_float_update_on_int_tree(self, seg_tree):
        seg_tree.update(1, 2.5)
        assert seg_tree[1] == 2.5
        assert seg_tree.query(0, 2) == pytest.approx(15.5)
        assert seg_tree.total() == pytest.approx(22.5)

    def test_sum_past_int64(self):
        tree = SegmentTree(3)
        tree.build([2**62, 2**62, 2**62])
        assert tree.query(0, 1) == 2**63
        assert tree.total() == 3 * 2**62

    def test_big_int_update(self, seg_tree):
        seg_tree.update(4, 2**70)
        assert seg_tree[4] == 2**70
        assert seg_tree.total() == 22 + 2**70
        assert seg_tree.query(3, 4) == 6 + 2**70


class TestSegmentTreeFailedUpdate:
    """An update whose combine raises leaves the tree as it was."""

    def test_failed_combine_changes_nothing(self, seg_tree):
        with pytest.raises(TypeError):
            seg_tree.update(2, "x")
        assert seg_tree.to_list() == [5, 3, 8, 6, 1]
        assert seg_tree.total() == 23
        assert seg_tree.query(2, 3) == 14
