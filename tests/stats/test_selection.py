"""Unit tests for StatsState override handling and serialization."""

import pytest

from entitystats.stats.grouper import group_records
from entitystats.stats.grouping import DEFAULT_GROUPINGS, get_grouping
from entitystats.stats.selection import DEFAULT_PICK_TOP, StatsState, resolve_selected
from entitystats.stats.top_selector import select_top


@pytest.fixture
def top(records):
    return select_top(group_records(records, get_grouping("provider")), 10)


def test_defaults_follow_catalog_positions():
    state = StatsState()
    assert state.grouping is DEFAULT_GROUPINGS[1]
    assert state.counting is DEFAULT_GROUPINGS[2]
    assert state.pick_top == DEFAULT_PICK_TOP == 10
    assert state.selection == []


def test_resolve_selected_absent_when_no_top():
    assert resolve_selected(None, []) is None


def test_resolve_selected_defaults_to_top(top):
    assert resolve_selected(top, []) == top


def test_resolve_selected_prefers_override(top):
    assert resolve_selected(top, top[1:2]) == top[1:2]


def test_set_grouping_clears_selection(top):
    state = StatsState()
    state.set_selection(top[:1])
    assert state.selection
    state.set_grouping(get_grouping("version"))
    assert state.selection == []


def test_set_pick_top_clears_selection(top):
    state = StatsState()
    state.set_selection(top[:1])
    state.set_pick_top(3)
    assert state.pick_top == 3
    assert state.selection == []


def test_set_counting_keeps_selection(top):
    state = StatsState()
    state.set_selection(top[:1])
    state.set_counting(get_grouping("tags"))
    assert state.selection == top[:1]


@pytest.mark.parametrize("bad", [-1, 2.5, "3", True])
def test_invalid_pick_top_raises(bad):
    with pytest.raises(ValueError, match="pick_top"):
        StatsState(pick_top=bad)


def test_set_pick_top_invalid_raises():
    state = StatsState()
    with pytest.raises(ValueError, match=">= 0"):
        state.set_pick_top(-2)


def test_to_dict_uses_names_and_titles(top):
    state = StatsState(pick_top=5)
    state.set_selection(top[:2])
    assert state.to_dict() == {
        "grouping": "provider",
        "counting": "paths",
        "pick_top": 5,
        "selection": ["acme", "beta"],
    }


def test_from_dict_round_trip_resolves_titles(top):
    state = StatsState(grouping=get_grouping("provider"), counting=get_grouping("tags"), pick_top=4)
    state.set_selection(top[1:3])
    restored = StatsState.from_dict(state.to_dict())
    assert restored.grouping.name == "provider"
    assert restored.counting.name == "tags"
    assert restored.pick_top == 4
    assert restored.selection == []
    assert [b.title for b in restored.override(top)] == ["beta", "gamma"]


def test_from_dict_missing_keys_use_defaults():
    state = StatsState.from_dict({})
    assert state.grouping.name == "provider"
    assert state.counting.name == "paths"
    assert state.pick_top == 10


def test_from_dict_unknown_grouping_raises():
    with pytest.raises(ValueError, match="Unknown grouping"):
        StatsState.from_dict({"grouping": "nope"})


def test_from_dict_unknown_key_warns(caplog):
    with caplog.at_level("WARNING", logger="entitystats"):
        StatsState.from_dict({"colour": "red"})
    assert "colour" in caplog.text


def test_override_skips_unknown_pending_titles_with_warning(top, caplog):
    state = StatsState.from_dict({"selection": ["missing", "acme"]})
    with caplog.at_level("WARNING", logger="entitystats"):
        active = state.override(top)
    assert [b.title for b in active] == ["acme"]
    assert "missing" in caplog.text


def test_set_grouping_drops_pending_titles(top):
    state = StatsState.from_dict({"selection": ["acme"]})
    state.set_grouping(get_grouping("all"))
    assert state.override(top) == []
