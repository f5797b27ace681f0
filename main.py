"""Console front-end for the MeuDia planner core."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from sqlmodel import Session

from core.logging_setup import configure_logging
from core.settings import DB_PATH, LOG_PATH, PLANNER
from core.task_kinds import KIND_META, GROUP_LABELS
from helpers.date_keys import is_valid_date_key
from helpers.week_window import week_window
from services.daily_counts import counts_for_today
from services.planner_view import PlannerItemRepository
from services.retention import prune_task_buckets
from services.task_groups import group_tasks
from services.task_store import TaskResult, TaskStore
from storage.db import get_engine, init_db
from storage.kv_store import SqliteKeyValueStore
from utils.clock import SYSTEM_CLOCK


def build_store(db_path: Optional[Path] = None) -> SqliteKeyValueStore:
    engine = get_engine(db_path)
    init_db(engine)
    return SqliteKeyValueStore(lambda: Session(engine))


def _date_key_arg(value: str) -> str:
    if not is_valid_date_key(value):
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")
    return value


def _print_result(result: TaskResult, verb: str) -> int:
    if not result.ok:
        print(f"Nothing to {verb} ({result.task_id or '-'} on {result.date_key}).")
        return 1
    details = result.status or "ok"
    if result.snooze_until:
        details += f" until {result.snooze_until}"
    print(f"{result.task_id} on {result.date_key}: {details}")
    return 0


def _cmd_today(tasks: TaskStore, args) -> int:
    items = tasks.list_tasks(args.date)
    if not items:
        print("No tasks.")
        return 0
    for group, group_items in group_tasks(items).items():
        if not group_items:
            continue
        print(GROUP_LABELS[group])
        for task in group_items:
            suffix = f" -> {task.snooze_until}" if task.snooze_until else ""
            print(f"  [{task.status:>7}] {task.id}  {task.title}{suffix}")
    return 0


def _cmd_week(tasks: TaskStore, args) -> int:
    window = week_window(args.date or tasks.clock.now())
    if window.is_empty:
        print("Invalid reference date.")
        return 1
    for key, label in zip(window.days, window.labels):
        print(f"{label}  {key}  {len(tasks.list_tasks(key))} tasks")
    return 0


def _cmd_counts(tasks: TaskStore, _args) -> int:
    counts = counts_for_today(tasks)
    print(f"saved today: {counts.saved_today}  later: {counts.later_today}")
    return 0


def _cmd_planner(tasks: TaskStore, args) -> int:
    repo = PlannerItemRepository(tasks.store, tasks.clock)
    for item in repo.items_within_days(args.days):
        mark = "x" if item.done else " "
        print(f"[{mark}] {item.date}  {item.title}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__ or "")
    parser.add_argument("--db", type=Path, default=DB_PATH, help="SQLite file (default: %(default)s)")
    parser.add_argument(
        "--log",
        type=Path,
        default=LOG_PATH,
        help="Path to a log file (default: %(default)s)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    today = sub.add_parser("today", help="List a day's tasks")
    today.add_argument("--date", type=_date_key_arg)

    add = sub.add_parser("add", help="Add a task")
    add.add_argument("title")
    add.add_argument("--kind", default="custom", choices=sorted(KIND_META))
    add.add_argument("--date", type=_date_key_arg)

    for name, help_text in (
        ("done", "Toggle a task between active and done"),
        ("unsnooze", "Bring a snoozed task back"),
        ("remove", "Delete a task"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("task_id")
        cmd.add_argument("--date", type=_date_key_arg)

    snooze = sub.add_parser("snooze", help="Defer a task to a later day")
    snooze.add_argument("task_id")
    snooze.add_argument("--days", type=int, default=PLANNER.default_snooze_days)
    snooze.add_argument("--date", type=_date_key_arg)

    week = sub.add_parser("week", help="Show the week window")
    week.add_argument("--date", type=_date_key_arg)

    sub.add_parser("counts", help="Saved vs. deferred counts for today")

    planner = sub.add_parser("planner", help="Planner items in a rolling window")
    planner.add_argument("--days", type=int, default=PLANNER.window_days)

    prune = sub.add_parser("prune", help="Delete day buckets older than N days")
    prune.add_argument("--keep-days", type=int, default=PLANNER.retention_days)
    return parser


def run(argv: Optional[List[str]] = None, *, tasks: Optional[TaskStore] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if tasks is None:
        configure_logging(args.log)
        tasks = TaskStore(build_store(args.db), SYSTEM_CLOCK)

    command = args.command
    if command == "today":
        return _cmd_today(tasks, args)
    if command == "add":
        return _print_result(tasks.add_task(args.title, args.kind, args.date), "add")
    if command == "done":
        return _print_result(tasks.toggle_done(args.task_id, args.date), "toggle")
    if command == "snooze":
        return _print_result(tasks.snooze_task(args.task_id, args.days, args.date), "snooze")
    if command == "unsnooze":
        return _print_result(tasks.unsnooze_task(args.task_id, args.date), "unsnooze")
    if command == "remove":
        return _print_result(tasks.remove_task(args.task_id, args.date), "remove")
    if command == "week":
        return _cmd_week(tasks, args)
    if command == "counts":
        return _cmd_counts(tasks, args)
    if command == "planner":
        return _cmd_planner(tasks, args)
    if command == "prune":
        removed = prune_task_buckets(tasks, args.keep_days)
        print(f"Removed {len(removed)} day buckets.")
        return 0
    parser.error(f"unknown command {command}")
    return 2


def main() -> None:
    try:
        code = run()
    except Exception as exc:  # pragma: no cover
        logging.getLogger("planner").exception("Command failed: %s", exc)
        raise
    raise SystemExit(code)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
