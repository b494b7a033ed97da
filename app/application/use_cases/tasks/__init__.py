"""Use cases for task data consumed by notifications."""

from .assign_task import assign_task
from .update_task import update_task

__all__ = ["assign_task", "update_task"]
