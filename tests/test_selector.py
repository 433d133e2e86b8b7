# tests/test_selector.py
"""Tests for wordset selection and vocabulary merging."""

import random

import pytest

from src.selector import InsufficientWordsets, merge_vocabulary, pick_one, pick_two_distinct


class TestMergeVocabulary:
    def test_union_keeps_first_seen_order(self):
        a = ["fox", "moon", "lantern"]
        b = ["lantern", "river", "fox", "glass"]
        assert merge_vocabulary(a, b) == ["fox", "moon", "lantern", "river", "glass"]

    def test_duplicates_within_one_wordset(self):
        assert merge_vocabulary(["a", "a", "b"], ["b"]) == ["a", "b"]

    def test_every_distinct_word_exactly_once(self):
        rng = random.Random(7)
        pool = [f"w{i}" for i in range(12)]
        for _ in range(50):
            a = [rng.choice(pool) for _ in range(6)]
            b = [rng.choice(pool) for _ in range(6)]
            merged = merge_vocabulary(a, b)
            assert set(merged) == set(a) | set(b)
            assert len(merged) == len(set(merged))

    def test_single_wordset(self):
        assert merge_vocabulary(["x", "y"]) == ["x", "y"]


class TestPickTwoDistinct:
    @pytest.mark.parametrize("size", [2, 3, 10])
    def test_never_returns_same_element(self, size):
        wordsets = [[f"word{i}"] for i in range(size)]
        rng = random.Random(1234)
        for _ in range(1000):
            first, second = pick_two_distinct(wordsets, rng)
            assert first is not second

    def test_identical_contents_are_still_distinct_elements(self):
        wordsets = [["same"], ["same"]]
        first, second = pick_two_distinct(wordsets, random.Random(0))
        assert first is not second

    def test_single_element_returned_twice(self):
        only = ["lonely", "word"]
        first, second = pick_two_distinct([only], random.Random(0))
        assert first is only
        assert second is only

    def test_empty_collection_raises(self):
        with pytest.raises(InsufficientWordsets):
            pick_two_distinct([], random.Random(0))

    def test_seeded_rng_is_deterministic(self):
        wordsets = [[str(i)] for i in range(20)]
        assert pick_two_distinct(wordsets, random.Random(99)) == pick_two_distinct(
            wordsets, random.Random(99)
        )

    def test_both_positions_cover_collection(self):
        wordsets = [["a"], ["b"], ["c"]]
        rng = random.Random(5)
        seen_first, seen_second = set(), set()
        for _ in range(300):
            first, second = pick_two_distinct(wordsets, rng)
            seen_first.add(first[0])
            seen_second.add(second[0])
        assert seen_first == {"a", "b", "c"}
        assert seen_second == {"a", "b", "c"}


class TestPickOne:
    def test_returns_member(self):
        wordsets = [["a"], ["b"], ["c"]]
        rng = random.Random(3)
        for _ in range(100):
            assert pick_one(wordsets, rng) in wordsets

    def test_empty_collection_raises(self):
        with pytest.raises(InsufficientWordsets):
            pick_one([])

    def test_default_rng(self):
        only = ["x"]
        assert pick_one([only]) is only
