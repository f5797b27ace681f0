"""Data models exposed by the planner core."""
from .kv_entry import KeyValueEntry
from .planner_item import PlannerItem
from .task_item import TaskItem

__all__ = ["KeyValueEntry", "PlannerItem", "TaskItem"]
