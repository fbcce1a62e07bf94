from __future__ import annotations

import pytest

from launchpad.workflow.pairs import PairList, collapse_pairs, duplicate_keys
from launchpad.workflow.state import FormState


def test_remove_at_keeps_relative_order() -> None:
    pairs = PairList([("A", "1"), ("B", "2"), ("C", "3"), ("D", "4")])
    removed = pairs.remove_at(1)
    assert removed.key == "B"
    assert pairs.items() == [("A", "1"), ("C", "3"), ("D", "4")]
    assert len(pairs) == 3


def test_edits_after_removal_target_shifted_entries() -> None:
    pairs = PairList([("A", "1"), ("B", "2"), ("C", "3")])
    pairs.remove_at(0)
    pairs.set_value(0, "20")
    pairs.set_key(1, "CC")
    assert pairs.items() == [("B", "20"), ("CC", "3")]


def test_entry_ids_are_stable_across_removal() -> None:
    pairs = PairList()
    first = pairs.append("A", "1")
    second = pairs.append("B", "2")
    third = pairs.append("C", "3")
    assert len({first.entry_id, second.entry_id, third.entry_id}) == 3
    pairs.remove_at(0)
    assert pairs.index_of(third.entry_id) == 1
    with pytest.raises(KeyError):
        pairs.index_of(first.entry_id)


def test_editing_one_entry_leaves_others_untouched() -> None:
    pairs = PairList([("A", "1"), ("B", "2")])
    pairs.set_key(0, "Z")
    assert pairs[1].key == "B"
    assert pairs[1].value == "2"


def test_append_defaults_to_empty_pair() -> None:
    pairs = PairList()
    entry = pairs.append()
    assert (entry.key, entry.value) == ("", "")
    assert pairs.to_list() == [{"key": "", "value": ""}]


@pytest.mark.parametrize("index", [-1, 2, 10])
def test_out_of_range_positions_raise(index: int) -> None:
    pairs = PairList([("A", "1"), ("B", "2")])
    with pytest.raises(IndexError):
        pairs.remove_at(index)
    with pytest.raises(IndexError):
        pairs.set_key(index, "X")
    assert len(pairs) == 2


def test_collapse_trims_and_last_write_wins() -> None:
    pairs = PairList([("A", "1"), (" B ", " two "), ("A ", "2")])
    assert collapse_pairs(pairs) == {"A": "2", "B": "two"}


def test_collapse_empty_list() -> None:
    assert collapse_pairs(PairList()) == {}


def test_duplicate_keys_reports_each_key_once() -> None:
    pairs = PairList([("A", "1"), ("A", "2"), (" A", "3"), ("B", "4"), ("", "5"), ("", "6")])
    assert duplicate_keys(pairs) == ["A"]


def test_form_state_loads_pair_lists() -> None:
    state = FormState.from_dict({"name": "svc", "config": [{"key": "A", "value": 1}], "build_args": None})
    assert state.config.items() == [("A", "1")]
    assert len(state.build_args) == 0


@pytest.mark.parametrize("value", [{"A": "1"}, ["A=1"], "A=1", [{"key": "A"}, "B"]])
def test_form_state_rejects_malformed_pair_lists(value) -> None:
    with pytest.raises(ValueError, match="build_args"):
        FormState.from_dict({"build_args": value})
