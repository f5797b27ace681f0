import threading
from datetime import datetime, timezone

import pytest

from services.task_store import TaskStore, bucket_key
from storage.memory import InMemoryStore
from utils.clock import FixedClock

DAY = "2024-05-15"


def test_lifecycle_add_toggle_toggle(tasks):
    added = tasks.add_task("buy milk", "custom", DAY)
    assert added.ok
    assert added.status == "active"

    listed = tasks.list_tasks(DAY)
    assert len(listed) == 1
    assert listed[0].title == "buy milk"
    assert listed[0].status == "active"
    assert listed[0].created_at == "2024-05-15T15:00:00.000Z"

    first = tasks.toggle_done(added.task_id, DAY)
    assert first.ok and first.status == "done"
    assert tasks.list_tasks(DAY)[0].status == "done"

    second = tasks.toggle_done(added.task_id, DAY)
    assert second.ok and second.status == "active"
    assert tasks.list_tasks(DAY)[0].status == "active"


def test_missing_bucket_lists_empty(tasks):
    assert tasks.list_tasks("2020-01-01") == []
    assert tasks.list_tasks("not-a-key") == []


def test_date_key_defaults_to_clock_day(memory_store):
    # 01:00 UTC is still the previous day in UTC-3.
    clock = FixedClock(datetime(2024, 5, 15, 1, 0, tzinfo=timezone.utc))
    store = TaskStore(memory_store, clock)
    result = store.add_task("late night")
    assert result.date_key == "2024-05-14"
    assert memory_store.load(bucket_key("2024-05-14"))[0]["title"] == "late night"


def test_add_rejects_empty_title_and_invalid_key(tasks):
    assert tasks.add_task("   ", "custom", DAY).ok is False
    assert tasks.add_task("ok", "custom", "15/05/2024").ok is False
    assert tasks.list_tasks(DAY) == []


def test_add_collapses_whitespace_and_normalizes_kind(tasks):
    result = tasks.add_task("  call   grandma ", "FAMILY", DAY)
    assert result.task.title == "call grandma"
    assert result.task.kind == "family"
    assert tasks.add_task("mystery", "unknown-kind", DAY).task.kind == "other"


def test_identical_adds_append_two_tasks(tasks):
    first = tasks.add_task("buy milk", "custom", DAY)
    second = tasks.add_task("buy milk", "custom", DAY)
    assert first.ok and second.ok
    assert first.task_id != second.task_id
    listed = tasks.list_tasks(DAY)
    assert [t.title for t in listed] == ["buy milk", "buy milk"]
    assert {t.id for t in listed} == {first.task_id, second.task_id}


def test_ids_are_unique_within_bucket(tasks):
    ids = {tasks.add_task(f"task {n}", "custom", DAY).task_id for n in range(50)}
    assert len(ids) == 50


def test_snooze_clamps_to_one_day(tasks):
    task_id = tasks.add_task("stretch", "selfcare", DAY).task_id
    zero = tasks.snooze_task(task_id, 0, DAY)
    one = tasks.snooze_task(task_id, 1, DAY)
    negative = tasks.snooze_task(task_id, -4, DAY)
    assert zero.snooze_until == one.snooze_until == negative.snooze_until == "2024-05-16"
    assert zero.status == "snoozed"


def test_snooze_several_days_and_bad_input(tasks):
    task_id = tasks.add_task("dentist", "agenda", DAY).task_id
    assert tasks.snooze_task(task_id, 3, DAY).snooze_until == "2024-05-18"
    assert tasks.snooze_task(task_id, "soon", DAY).snooze_until == "2024-05-16"
    stored = tasks.get_task(task_id, DAY)
    assert stored.status == "snoozed"
    assert stored.snooze_until > DAY


def test_toggle_snoozed_goes_to_done_and_clears_pointer(tasks):
    task_id = tasks.add_task("read", "custom", DAY).task_id
    tasks.snooze_task(task_id, 2, DAY)
    result = tasks.toggle_done(task_id, DAY)
    assert result.status == "done"
    assert result.snooze_until is None
    assert tasks.get_task(task_id, DAY).snooze_until is None


def test_unsnooze_returns_to_active(tasks):
    task_id = tasks.add_task("read", "custom", DAY).task_id
    tasks.snooze_task(task_id, 1, DAY)
    result = tasks.unsnooze_task(task_id, DAY)
    assert result.ok and result.status == "active"
    assert tasks.get_task(task_id, DAY).snooze_until is None


def test_unsnooze_leaves_done_task_untouched(tasks, memory_store):
    task_id = tasks.add_task("read", "custom", DAY).task_id
    tasks.toggle_done(task_id, DAY)
    saves = memory_store.save_calls
    result = tasks.unsnooze_task(task_id, DAY)
    assert result.ok and result.status == "done"
    assert memory_store.save_calls == saves


def test_unknown_task_is_a_no_op(tasks):
    tasks.add_task("keep", "custom", DAY)
    for result in (
        tasks.toggle_done("missing", DAY),
        tasks.snooze_task("missing", 1, DAY),
        tasks.rename_task("missing", "x", DAY),
    ):
        assert result.ok is False
        assert result.status is None
    assert [t.status for t in tasks.list_tasks(DAY)] == ["active"]


def test_remove_missing_task_is_idempotent(tasks, memory_store):
    tasks.add_task("one", "custom", DAY)
    tasks.add_task("two", "custom", DAY)
    saves = memory_store.save_calls
    result = tasks.remove_task("missing", DAY)
    assert result.ok is True
    assert len(tasks.list_tasks(DAY)) == 2
    assert memory_store.save_calls == saves


def test_remove_existing_task(tasks):
    keep = tasks.add_task("keep", "custom", DAY).task_id
    drop = tasks.add_task("drop", "custom", DAY).task_id
    assert tasks.remove_task(drop, DAY).ok
    assert [t.id for t in tasks.list_tasks(DAY)] == [keep]


def test_rename_task(tasks):
    task_id = tasks.add_task("draft", "custom", DAY).task_id
    assert tasks.rename_task(task_id, "  final   title ", DAY).task.title == "final title"
    assert tasks.rename_task(task_id, "   ", DAY).ok is False
    assert tasks.get_task(task_id, DAY).title == "final title"


def test_buckets_are_isolated(tasks, memory_store):
    a = tasks.add_task("monday thing", "custom", "2024-05-13").task_id
    tasks.add_task("wednesday thing", "custom", DAY)
    tasks.toggle_done(a, DAY)
    tasks.remove_task(a, DAY)
    assert tasks.list_tasks("2024-05-13")[0].status == "active"
    assert memory_store.keys("planner/tasks/") == ["planner/tasks/2024-05-13", "planner/tasks/2024-05-15"]
    assert tasks.bucket_keys() == ["2024-05-13", "2024-05-15"]


def test_legacy_records_are_normalized(memory_store, clock):
    memory_store.save(
        bucket_key(DAY),
        [
            {"id": "a", "title": "old done", "done": True, "origin": "family"},
            {"title": "  no id  ", "origin": "weird"},
            {"id": "c", "title": "", "status": "active"},
            "not a record",
            {"id": "d", "title": "bad status", "status": "paused"},
        ],
    )
    listed = TaskStore(memory_store, clock).list_tasks(DAY)
    assert [t.title for t in listed] == ["old done", "no id", "bad status"]
    assert listed[0].status == "done" and listed[0].kind == "family"
    assert listed[1].id == "legacy-2024-05-15-1" and listed[1].kind == "other"
    assert listed[2].status == "active"


def test_record_without_id_can_be_toggled_then_removed(memory_store, clock):
    memory_store.save(bucket_key(DAY), [{"title": "no id", "status": "active"}])
    store = TaskStore(memory_store, clock)

    listed_id = store.list_tasks(DAY)[0].id
    assert store.list_tasks(DAY)[0].id == listed_id

    toggled = store.toggle_done(listed_id, DAY)
    assert toggled.ok and toggled.status == "done"
    assert memory_store.load(bucket_key(DAY))[0]["id"] == listed_id

    assert store.remove_task(listed_id, DAY).ok
    assert store.list_tasks(DAY) == []
    assert memory_store.load(bucket_key(DAY)) == []


def test_unreadable_records_survive_mutations(memory_store, clock):
    memory_store.save(
        bucket_key(DAY),
        [
            {"id": "a", "title": "keep me", "status": "active"},
            {"id": "c", "title": "", "status": "active"},
            "not a record",
        ],
    )
    store = TaskStore(memory_store, clock)
    assert [t.id for t in store.list_tasks(DAY)] == ["a"]

    store.toggle_done("a", DAY)
    store.add_task("new one", "custom", DAY)
    raw = memory_store.load(bucket_key(DAY))
    assert {"id": "c", "title": "", "status": "active"} in raw
    assert "not a record" in raw
    assert [t.title for t in store.list_tasks(DAY)] == ["keep me", "new one"]


def test_malformed_storage_reads_as_empty(memory_store, clock):
    memory_store.save_raw(bucket_key(DAY), "{not json")
    memory_store.save("planner/tasks/2024-05-16", {"oops": True})
    store = TaskStore(memory_store, clock)
    assert store.list_tasks(DAY) == []
    assert store.list_tasks("2024-05-16") == []
    assert store.add_task("recover", "custom", DAY).ok
    assert len(store.list_tasks(DAY)) == 1


def test_failed_save_reports_not_ok(clock):
    class ReadOnlyStore(InMemoryStore):
        def save(self, key, value):
            return False

    store = TaskStore(ReadOnlyStore(), clock)
    assert store.add_task("lost", "custom", DAY).ok is False
    assert store.list_tasks(DAY) == []


def test_serialized_shape(tasks, memory_store):
    task_id = tasks.add_task("shape", "top3", DAY).task_id
    tasks.snooze_task(task_id, 1, DAY)
    record = memory_store.load(bucket_key(DAY))[0]
    assert record == {
        "id": task_id,
        "title": "shape",
        "kind": "top3",
        "status": "snoozed",
        "done": False,
        "createdAt": "2024-05-15T15:00:00.000Z",
        "source": "planner",
        "snoozeUntil": "2024-05-16",
    }


def test_listeners_receive_events_and_failures_are_contained(tasks):
    seen = []

    def broken(date_key, task_id):
        raise RuntimeError("listener bug")

    tasks.subscribe("after_create", lambda key, tid: seen.append(("create", key, tid)))
    tasks.subscribe("after_update", lambda key, tid: seen.append(("update", key, tid)))
    tasks.subscribe("after_delete", lambda key, tid: seen.append(("delete", key, tid)))
    tasks.subscribe("after_create", broken)

    task_id = tasks.add_task("observed", "custom", DAY).task_id
    tasks.toggle_done(task_id, DAY)
    tasks.remove_task(task_id, DAY)
    assert [event for event, _, _ in seen] == ["create", "update", "delete"]

    tasks.unsubscribe("after_create", broken)
    with pytest.raises(ValueError):
        tasks.subscribe("before_create", broken)


def test_unchanged_task_emits_no_update(tasks, memory_store):
    updates = []
    tasks.subscribe("after_update", lambda key, tid: updates.append(tid))
    task_id = tasks.add_task("same", "custom", DAY).task_id
    saves = memory_store.save_calls

    assert tasks.unsnooze_task(task_id, DAY).ok
    assert tasks.rename_task(task_id, "  same ", DAY).ok
    assert updates == []
    assert memory_store.save_calls == saves

    tasks.rename_task(task_id, "different", DAY)
    assert updates == [task_id]


def test_bucket_locks_are_released_after_use(tasks):
    for n in range(5):
        key = f"2024-05-1{n}"
        task_id = tasks.add_task("x", "custom", key).task_id
        tasks.toggle_done(task_id, key)
        tasks.remove_task(task_id, key)
    assert tasks._locks == {}


def test_concurrent_adds_to_one_bucket_are_not_lost(tasks):
    def worker(n):
        for i in range(10):
            tasks.add_task(f"worker {n} item {i}", "custom", DAY)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(tasks.list_tasks(DAY)) == 40
