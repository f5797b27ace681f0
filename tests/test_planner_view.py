from datetime import datetime, timezone

import pytest

from services.planner_view import PlannerItemRepository


@pytest.fixture()
def repo(memory_store, clock):
    return PlannerItemRepository(memory_store, clock)


def _seed(memory_store, *items):
    memory_store.save("planner/items", list(items))


def test_window_includes_recent_and_excludes_old(repo, memory_store):
    _seed(
        memory_store,
        {"id": "today", "title": "Today", "date": "2024-05-15"},
        {"id": "three", "title": "Three days ago", "date": "2024-05-12"},
        {"id": "ten", "title": "Ten days ago", "date": "2024-05-05"},
    )
    assert [item.id for item in repo.items_within_days(7)] == ["today", "three"]


def test_window_edge_is_civil_midnight(repo, memory_store):
    _seed(
        memory_store,
        {"id": "first-day", "title": "a", "date": "2024-05-09"},
        {"id": "day-before", "title": "b", "date": "2024-05-08"},
        {"id": "just-after", "title": "c", "date": "2024-05-09T03:30:00Z"},
        {"id": "just-before", "title": "d", "date": "2024-05-09T02:59:00Z"},
    )
    assert [item.id for item in repo.items_within_days(7)] == ["first-day", "just-after"]
    assert repo.cutoff(7) == datetime(2024, 5, 9, 3, 0, tzinfo=timezone.utc)


def test_malformed_dates_are_skipped(repo, memory_store):
    _seed(
        memory_store,
        {"id": "ok", "title": "fine", "date": "2024-05-14"},
        {"id": "words", "title": "bad", "date": "next tuesday"},
        {"id": "impossible", "title": "bad", "date": "2024-02-31"},
        {"id": "missing", "title": "no date"},
        {"title": "no id", "date": "2024-05-14"},
        "junk",
    )
    assert [item.id for item in repo.items_within_days()] == ["ok"]


def test_window_of_one_day_and_non_positive(repo, memory_store):
    _seed(
        memory_store,
        {"id": "today", "title": "t", "date": "2024-05-15"},
        {"id": "yesterday", "title": "y", "date": "2024-05-14"},
    )
    assert [item.id for item in repo.items_within_days(1)] == ["today"]
    assert [item.id for item in repo.items_within_days(0)] == ["today"]


def test_non_list_storage_is_empty(repo, memory_store):
    memory_store.save("planner/items", {"2024-05-15": []})
    assert repo.list_items() == []
    assert repo.items_within_days() == []


def test_add_toggle_remove(repo):
    item = repo.add_item("  Bake   bread ", "2024-05-16", note="whole wheat", type="Receita")
    assert item.title == "Bake bread"
    assert repo.add_item("", "2024-05-16") is None

    assert repo.set_done(item.id).done is True
    assert repo.list_items()[0].done is True
    assert repo.list_items()[0].note == "whole wheat"
    assert repo.set_done("missing") is None

    assert repo.remove_item("missing") is True
    assert repo.remove_item(item.id) is True
    assert repo.list_items() == []


def test_items_for_week_groups_by_day(repo, memory_store):
    _seed(
        memory_store,
        {"id": "mon", "title": "m", "date": "2024-05-13"},
        {"id": "sun-evening", "title": "s", "date": "2024-05-20T01:00:00Z"},
        {"id": "next-week", "title": "n", "date": "2024-05-20"},
        {"id": "broken", "title": "b", "date": "??"},
    )
    grouped = repo.items_for_week()
    assert list(grouped) == [
        "2024-05-13",
        "2024-05-14",
        "2024-05-15",
        "2024-05-16",
        "2024-05-17",
        "2024-05-18",
        "2024-05-19",
    ]
    assert [item.id for item in grouped["2024-05-13"]] == ["mon"]
    assert [item.id for item in grouped["2024-05-19"]] == ["sun-evening"]
    assert sum(len(v) for v in grouped.values()) == 2
