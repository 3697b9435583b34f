from __future__ import annotations

from typing import Sequence

from .models import Outcome, Task


def interpret_tasks(tasks: Sequence[Task]) -> Outcome:
    """Classify a fresh catalog's task list.

    No tasks means nothing asynchronous was left to do. Otherwise only the
    first task counts: the platform lists tasks in creation order and the
    first one is the initial sync.
    """
    if not tasks:
        return Outcome.success()

    task = tasks[0]
    if task.status == "running":
        return Outcome.in_progress(task.operation)
    if task.status == "error":
        return Outcome.error(task.error_message)
    return Outcome.unknown(task.status)
