# backend/utils/task_status.py
"""
Progress and status derivation for tasks.

Replacing the checklist always recomputes ``progress`` and then ``status``
from it. Setting the status directly only syncs in one direction: moving to
Completed completes every checklist item and pins progress at 100, while
moving to Pending or In Progress leaves progress as it was.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from models.task import Task, TodoItem

logger = logging.getLogger(__name__)

PENDING = "Pending"
IN_PROGRESS = "In Progress"
COMPLETED = "Completed"


def compute_progress(items: Iterable) -> int:
    """Percentage of completed items, rounded half up; 0 for an empty checklist."""
    items = list(items)
    total = len(items)
    if total == 0:
        return 0
    completed = sum(1 for item in items if _is_completed(item))
    # Integer form of floor(100 * completed / total + 0.5)
    return (200 * completed + total) // (2 * total)


def status_for_progress(progress: int) -> str:
    if progress == 0:
        return PENDING
    if progress == 100:
        return COMPLETED
    return IN_PROGRESS


def build_checklist(items: Iterable) -> List[TodoItem]:
    return [
        TodoItem(position=position, text=_field(item, "text"), completed=_is_completed(item))
        for position, item in enumerate(items)
    ]


def apply_checklist(task: Task, items: Iterable) -> Task:
    """Replace the checklist and derive progress/status without committing."""
    task.todo_checklist = build_checklist(items)
    task.progress = compute_progress(task.todo_checklist)
    task.status = status_for_progress(task.progress)
    return task


def apply_status(task: Task, requested_status: Optional[str]) -> Task:
    """Set the status (None keeps it) and sync the checklist when it becomes Completed."""
    if requested_status:
        task.status = requested_status
    if task.status == COMPLETED:
        for item in task.todo_checklist:
            item.completed = True
        task.progress = 100
    return task


def apply_checklist_update(db: Session, task: Task, items: Iterable) -> Task:
    apply_checklist(task, items)
    db.commit()
    db.refresh(task)
    logger.info("Task %s checklist replaced: progress=%s status=%s", task.id, task.progress, task.status)
    return task


def apply_status_update(db: Session, task: Task, requested_status: Optional[str]) -> Task:
    apply_status(task, requested_status)
    db.commit()
    db.refresh(task)
    logger.info("Task %s status set to %s", task.id, task.status)
    return task


def _field(item, name):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _is_completed(item) -> bool:
    return bool(_field(item, "completed"))
