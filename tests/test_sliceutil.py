import pytest

from utilkit import sliceutil
from utilkit.sliceutil import (
    clone,
    contains,
    contains_items,
    dedupe,
    diff,
    elements_match,
    equal,
    first_non_zero,
    is_empty,
    merge,
    merge_items,
    pick_random,
    prune_empty_strings,
    prune_equal,
    to_int,
    visit_random,
    visit_random_zero,
    visit_sequential,
)


def test_prune_empty_strings():
    assert prune_empty_strings(["a", "", "", "b"]) == ["a", "b"]


def test_prune_equal():
    assert prune_equal(["a", "", "", "b"], "b") == ["a", "", ""]
    assert prune_equal([1, 2, 3, 4], 2) == [1, 3, 4]


def test_dedupe():
    assert dedupe(["a", "a", "b", "b"]) == ["a", "b"]
    assert dedupe([1, 1, 2, 2]) == [1, 2]


def test_pick_random():
    assert pick_random(["a", "b"]) in ["a", "b"]
    assert pick_random([1, 2]) in [1, 2]


def test_pick_random_empty():
    with pytest.raises(IndexError):
        pick_random([])


def test_contains():
    assert contains(["a", "b"], "a") is True
    assert contains([1, 2], 1) is True
    assert contains([1, 2], 3) is False


def test_contains_items():
    assert contains_items(["a", "b", "c"], ["a", "c"]) is True
    assert contains_items([1, 2, 3], [1, 3]) is True
    assert contains_items([1, 2, 3], [1, 4]) is False


def test_to_int():
    assert to_int(["1", "2"]) == [1, 2]


@pytest.mark.parametrize("bad", [["1", "x"], [" 1"], ["1_000"], [""]])
def test_to_int_invalid(bad):
    with pytest.raises(ValueError):
        to_int(bad)


def test_equal():
    items = ["1", "2"]
    assert equal(items, items) is True
    assert equal(items, ["2", "1"]) is False
    assert equal(items, ["1"]) is False


def test_is_empty():
    assert is_empty([]) is True
    assert is_empty(["a"]) is False


def test_elements_match():
    assert elements_match([], []) is True
    assert elements_match([1], [1]) is True
    assert elements_match([1, 2], [2, 1]) is True
    assert elements_match([1], [2]) is False


def test_diff():
    extra1, extra2 = diff([1, 2, 3], [3, 4, 5])
    assert sorted(extra1) == [1, 2]
    assert sorted(extra2) == [4, 5]


@pytest.mark.parametrize(
    "inputs, expected",
    [
        ([[1, 2, 3], [3, 4, 5], [5, 6, 7]], [1, 2, 3, 4, 5, 6, 7]),
        ([[1, 1, 2], [2, 3, 3], [3, 4, 5]], [1, 2, 3, 4, 5]),
        ([[1, 2, 3], [4, 5, 6]], [1, 2, 3, 4, 5, 6]),
    ],
)
def test_merge(inputs, expected):
    assert elements_match(expected, merge(*inputs))


@pytest.mark.parametrize(
    "inputs, expected",
    [
        ([1, 2, 3, 3, 4, 5, 5, 6, 7], [1, 2, 3, 4, 5, 6, 7]),
        ([1, 1, 2, 2, 3, 3], [1, 2, 3]),
        ([1, 2, 3, 4, 5, 6], [1, 2, 3, 4, 5, 6]),
    ],
)
def test_merge_items(inputs, expected):
    assert elements_match(expected, merge_items(*inputs))


def test_first_non_zero_int():
    assert first_non_zero([0, 0, 3, 5, 10]) == (3, True)
    assert first_non_zero([])[1] is False


def test_first_non_zero_string():
    assert first_non_zero(["", "foo", "test"]) == ("foo", True)
    assert first_non_zero([]) == (None, False)


def test_first_non_zero_float():
    assert first_non_zero([0.0, 0.0, 0.0, 1.2, 3.4]) == (1.2, True)


def test_first_non_zero_bool():
    assert first_non_zero([False, False, False]) == (False, False)


def test_clone():
    ints = [1, 2, 3]
    copied = clone(ints)
    assert copied == ints
    copied.append(4)
    assert ints == [1, 2, 3]
    assert clone(["a", "b", "c"]) == ["a", "b", "c"]
    assert clone(bytes([1, 2, 3])) == [1, 2, 3]


def test_visit_sequential():
    items = [1, 2, 3]
    seen = []
    visit_sequential(items, lambda index, item: seen.append(item))
    assert seen == items


def test_visit_sequential_stops_on_false():
    seen = []
    visit_sequential(
        [1, 2, 3, 4], lambda index, item: seen.append(item) or index < 1
    )
    assert seen == [1, 2]


def test_visit_random():
    items = list(range(1, 11))
    times_different = 0
    for _ in range(100):
        seen = []
        visit_random(items, lambda index, item: seen.append(item))
        if not equal(items, seen):
            times_different += 1
        assert elements_match(items, seen)
    assert times_different > 0


def test_visit_random_index_matches_item():
    items = ["a", "b", "c", "d"]
    pairs = []
    visit_random(items, lambda index, item: pairs.append((index, item)))
    assert all(items[index] == item for index, item in pairs)
    assert len(pairs) == 4


def test_visit_random_zero():
    items = list(range(1, 11))
    times_different = 0
    for _ in range(100):
        seen = []
        visit_random_zero(items, lambda index, item: seen.append(item))
        if not equal(items, seen):
            times_different += 1
        assert elements_match(items, seen)
    assert times_different > 0


@pytest.mark.parametrize("size", [0, 1, 2, 7, 100, 1000])
def test_blackrock_is_permutation(size):
    shuffler = sliceutil._Blackrock(size, 12345)
    assert sorted(shuffler.indices()) == list(range(size))