"""Domain and ORM models exposed by the application."""
from .state import StateRecord
from .task import Task, TaskFormatError

__all__ = ["StateRecord", "Task", "TaskFormatError"]
