from __future__ import annotations

import random

import pytest

from .models import EventType
from .timeline_generator import (
    LEADER_NAMES,
    LEADER_TITLES,
    event_count_for,
    ensure_sorted,
    event_type_for,
    generate_timeline,
    significance_for,
)


def test_event_count_is_clamped_between_three_and_eight():
    assert event_count_for(0) == 3
    assert event_count_for(149) == 3
    assert event_count_for(250) == 5
    assert event_count_for(5000) == 8


def test_generate_timeline_spreads_events_across_period():
    items = generate_timeline("Roman Empire", -753, 476, event_id="roman-empire", rng=random.Random(7))
    assert len(items) == 8
    assert items[0].year == -753
    assert items[-1].year == 476
    assert [item.year for item in items] == sorted(item.year for item in items)
    assert all(-753 <= item.year <= 476 for item in items)
    assert all(item.id.startswith("roman-empire-") for item in items)


def test_generate_timeline_assigns_types_by_position():
    items = generate_timeline("Roman Empire", -753, 476, event_id="roman-empire", rng=random.Random(7))
    types = [item.type for item in items]
    assert types == [
        EventType.MILESTONE,
        EventType.BATTLE,
        EventType.TREATY,
        EventType.DISCOVERY,
        EventType.MAJOR,
        EventType.BATTLE,
        EventType.TREATY,
        EventType.MILESTONE,
    ]
    assert items[0].significance == 10
    assert items[-1].significance == 10
    assert items[3].significance == 8


def test_significance_boost_is_capped():
    assert significance_for(EventType.MILESTONE, 0, 3) == 10
    assert significance_for(EventType.MINOR, 2, 3) == 5
    assert significance_for(EventType.TREATY, 1, 3) == 6


def test_short_period_has_major_middle_event():
    items = generate_timeline("World War I", 1914, 1918, event_id="world-war-i", rng=random.Random(1))
    assert [item.year for item in items] == [1914, 1916, 1918]
    assert event_type_for(1, 3) == EventType.MAJOR
    assert items[1].type == EventType.MAJOR


def test_templates_open_and_close_the_timeline():
    items = generate_timeline("Ming Dynasty", 1368, 1644, event_id="ming-dynasty", rng=random.Random(3))
    assert items[0].title == "Beginning of Ming Dynasty"
    assert [item.title for item in items[1:-1]] == ["Major Expansion", "Peak Period", "Significant Changes"]
    assert items[1].description.startswith("Major expansion")
    assert items[-1].title == "End of Ming Dynasty"
    assert "Ming Dynasty" in items[-1].description
    assert all(item.impact for item in items)


def test_key_figures_have_title_and_name():
    items = generate_timeline("Byzantine Empire", 330, 1453, event_id="byzantine-empire", rng=random.Random(11))
    for item in items:
        assert 1 <= len(item.key_figures) <= 3
        for figure in item.key_figures:
            title, name = figure.split(" ")
            assert title in LEADER_TITLES
            assert name in LEADER_NAMES


def test_seeded_random_source_is_reproducible():
    first = generate_timeline("Viking Age", 800, 1100, event_id="viking-age", rng=random.Random(42))
    second = generate_timeline("Viking Age", 800, 1100, event_id="viking-age", rng=random.Random(42))
    assert first == second


def test_zero_length_period_still_yields_three_events():
    items = generate_timeline("Battle of Hastings", 1066, 1066, event_id="battle-of-hastings")
    assert len(items) == 3
    assert {item.year for item in items} == {1066}


def test_reversed_period_is_rejected():
    with pytest.raises(ValueError):
        generate_timeline("Broken", 1500, 1000, event_id="broken")


def test_ensure_sorted_rejects_out_of_order_events():
    items = generate_timeline("Roman Empire", -753, 476, event_id="roman-empire", rng=random.Random(5))
    ensure_sorted(items)
    with pytest.raises(ValueError):
        ensure_sorted(list(reversed(items)))
