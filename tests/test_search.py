import pytest

from swissdoubles.pairing.search import (
    find_repeat_free_pairing,
    has_odd_component,
    greedy_pairing,
    skipped_over,
)


def _forbid(*pairs):
    banned = {frozenset(p) for p in pairs}
    return lambda a, b: frozenset((a, b)) not in banned


def test_neighbours_are_paired_when_nothing_is_forbidden():
    assert find_repeat_free_pairing("abcd", _forbid()) == [("a", "b"), ("c", "d")]


def test_forbidden_pair_is_skipped():
    pairs = find_repeat_free_pairing("abcd", _forbid(("a", "b")))

    assert pairs == [("a", "c"), ("b", "d")]


def test_search_looks_ahead_where_greedy_gets_stuck():
    compatible = _forbid(("c", "d"))

    greedy = greedy_pairing("abcd", compatible)
    searched = find_repeat_free_pairing("abcd", compatible)

    assert greedy[-1] == ("c", "d", True)
    assert searched == [("a", "c"), ("b", "d")]


def test_no_pairing_when_someone_has_no_allowed_partner():
    compatible = _forbid(("a", "b"), ("a", "c"), ("a", "d"))

    assert find_repeat_free_pairing("abcd", compatible) is None


def test_search_gives_up_when_budget_is_spent():
    assert find_repeat_free_pairing("abcd", _forbid(), node_budget=0) is None


def test_odd_number_of_items_is_rejected():
    with pytest.raises(ValueError):
        find_repeat_free_pairing("abc", _forbid())
    with pytest.raises(ValueError):
        greedy_pairing("abc", _forbid())


def test_greedy_marks_only_relaxed_pairs():
    pairs = greedy_pairing("abcd", _forbid(("a", "b")))

    assert pairs == [("a", "c", False), ("b", "d", False)]


def test_skipped_over_reports_items_passed_in_walk_order():
    items = ["a", "b", "c", "d", "e", "f"]
    pairs = [("a", "c"), ("b", "e"), ("d", "f")]

    assert skipped_over(items, pairs) == [["b"], ["d"], []]


def test_odd_groups_are_detected():
    def compatible(x, y):
        return (x in "abc") == (y in "abc")

    assert has_odd_component("abcdef", compatible)
    assert not has_odd_component("abcd", _forbid(("a", "b")))


def test_split_field_is_rejected_without_searching():
    # every A has partnered every B, leaving 19 A and 21 B
    items = [f"A{i:02d}" for i in range(19)] + [f"B{i:02d}" for i in range(21)]
    calls = {"n": 0}

    def compatible(a, b):
        calls["n"] += 1
        return a[0] == b[0]

    assert find_repeat_free_pairing(items, compatible) is None
    assert calls["n"] <= len(items) ** 2
