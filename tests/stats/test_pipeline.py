"""End-to-end tests for run_stats."""

from collections import Counter

import pandas as pd
import pytest

from entitystats.stats.grouping import get_grouping
from entitystats.stats.histogram import HISTOGRAM_WIDTH
from entitystats.stats.pipeline import run_stats
from entitystats.stats.records import COLUMN_FIELD
from entitystats.stats.selection import StatsState
from entitystats.stats.top_selector import OTHER_TITLE

from stats_helpers import make_record


def test_run_stats_no_data_is_absent_everywhere():
    result = run_stats(None, StatsState())
    assert result.grouped is None
    assert result.top is None
    assert result.total is None
    assert result.selected is None
    assert result.filtered is None
    assert result.counted is None
    assert result.histogram is None


def test_run_stats_empty_data_is_empty_not_absent():
    result = run_stats([], StatsState())
    assert result.grouped == []
    assert result.top == []
    assert result.total == 0
    assert result.selected == []
    assert result.filtered == []
    assert result.counted == []
    assert result.histogram == []


def test_run_stats_defaults(records):
    result = run_stats(records)
    assert result.total == 7
    assert [b.title for b in result.top] == ["acme", "beta", "gamma"]
    assert result.selected == result.top
    assert len(result.filtered) == 7
    assert result.histogram is not None
    last = result.selected[-1].title
    stack_tops = [b.hist_pos[last] + b.hist_sum[last] for b in result.histogram]
    assert max(stack_tops) == pytest.approx(HISTOGRAM_WIDTH)


def test_run_stats_does_not_mutate_input(records):
    before = [dict(r) for r in records]
    run_stats(records)
    assert records == before
    assert all(COLUMN_FIELD not in r for r in records)


def test_run_stats_override_limits_active_groups(records):
    state = StatsState()
    first = run_stats(records, state)
    state.set_selection([b for b in first.top if b.title == "beta"])
    result = run_stats(records, state)
    assert [b.title for b in result.selected] == ["beta"]
    assert {r[COLUMN_FIELD] for r in result.filtered} == {"beta"}
    assert all(set(c.counts) == {"beta"} for c in result.counted)


def test_run_stats_override_cleared_by_grouping_change(records):
    state = StatsState()
    first = run_stats(records, state)
    state.set_selection(first.top[:1])
    state.set_grouping(get_grouping("all"))
    result = run_stats(records, state)
    assert [b.title for b in result.selected] == ["all"]


def test_run_stats_categorical_counting_has_no_histogram(records):
    state = StatsState(counting=get_grouping("method"))
    result = run_stats(records, state)
    assert result.counted
    assert result.histogram is None


def test_run_stats_other_bucket(records):
    state = StatsState(pick_top=2)
    result = run_stats(records, state)
    titles = [b.title for b in result.top]
    assert titles == [OTHER_TITLE, "acme"]
    other = result.top[0]
    assert other.total == 4
    assert other.min == 2
    assert Counter(r[COLUMN_FIELD] for r in result.filtered) == Counter({"acme": 3, OTHER_TITLE: 4})


def test_run_stats_numeric_scenario():
    """Counting values [1,1,2,5,5,5] under one group."""
    data = [make_record(f"r{i}", provider="p", paths=v) for i, v in enumerate([1, 1, 2, 5, 5, 5])]
    result = run_stats(data, StatsState(grouping=get_grouping("all")))
    hist = result.histogram
    assert hist[0].x0 == 1
    assert hist[-1].x1 == 5
    tallest = max(hist, key=lambda b: b.hist_sum["all"])
    assert 5 in [c.value for c in tallest.items]
    assert tallest.hist_pos["all"] + tallest.hist_sum["all"] == pytest.approx(320)


def test_run_stats_accepts_dataframe(records):
    df = pd.DataFrame(records)
    result = run_stats(df)
    assert result.total == len(records)
    assert [b.title for b in result.top] == ["acme", "beta", "gamma"]


def test_run_stats_is_repeatable(records):
    state = StatsState(counting=get_grouping("tags"))
    first = run_stats(records, state)
    second = run_stats(records, state)
    assert [b.title for b in first.top] == [b.title for b in second.top]
    assert [c.title for c in first.counted] == [c.title for c in second.counted]
    assert [b.hist_sum for b in first.histogram] == [b.hist_sum for b in second.histogram]


def test_run_stats_real_other_group_keeps_stack_height():
    data = [make_record(f"o{i}", provider="other", paths=v) for i, v in enumerate([1, 1, 2])]
    data += [make_record("a1", provider="a", paths=2), make_record("b1", provider="b", paths=3)]
    result = run_stats(data, StatsState(pick_top=2))
    assert [b.title for b in result.selected] == [OTHER_TITLE]
    assert sum(b.hist_max for b in result.histogram) == len(data)
    tops = [b.hist_pos[OTHER_TITLE] + b.hist_sum[OTHER_TITLE] for b in result.histogram]
    assert max(tops) == pytest.approx(HISTOGRAM_WIDTH)
