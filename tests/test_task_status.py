# tests/test_task_status.py

from __future__ import annotations

from datetime import datetime

import pytest

from models.task import Task, TodoItem
from utils.task_status import (
    apply_checklist,
    apply_checklist_update,
    apply_status,
    apply_status_update,
    compute_progress,
    status_for_progress,
)

from .conftest import make_task


def _items(*flags: bool) -> list[dict]:
    return [{"text": f"step {i}", "completed": flag} for i, flag in enumerate(flags)]


def _task(**fields) -> Task:
    task = Task(title="t", priority="Low", status="Pending", due_date=datetime(2030, 1, 1), progress=0)
    for name, value in fields.items():
        setattr(task, name, value)
    return task


def test_empty_checklist_is_pending_with_zero_progress() -> None:
    task = apply_checklist(_task(status="In Progress", progress=40), [])

    assert task.progress == 0
    assert task.status == "Pending"
    assert task.todo_checklist == []


def test_half_done_checklist_is_in_progress() -> None:
    task = apply_checklist(_task(), _items(True, False))

    assert task.progress == 50
    assert task.status == "In Progress"


def test_fully_done_checklist_completes_task() -> None:
    task = apply_checklist(_task(), _items(True, True, True))

    assert task.progress == 100
    assert task.status == "Completed"


@pytest.mark.parametrize(
    ("completed", "total", "expected"),
    [(1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 8, 38), (1, 200, 1), (199, 200, 100), (1, 201, 0)],
)
def test_progress_rounds_half_up(completed: int, total: int, expected: int) -> None:
    flags = [True] * completed + [False] * (total - completed)
    assert compute_progress(_items(*flags)) == expected


def test_progress_matches_rounded_ratio_for_small_checklists() -> None:
    for total in range(1, 13):
        for completed in range(total + 1):
            flags = [True] * completed + [False] * (total - completed)
            progress = compute_progress(_items(*flags))
            assert abs(progress - 100 * completed / total) <= 0.5
            assert status_for_progress(progress) == (
                "Pending" if progress == 0 else "Completed" if progress == 100 else "In Progress"
            )


def test_status_follows_rounded_progress_not_raw_ratio() -> None:
    # 199/200 rounds to 100, 1/201 rounds to 0
    assert apply_checklist(_task(), _items(*([True] * 199 + [False]))).status == "Completed"
    assert apply_checklist(_task(), _items(*([True] + [False] * 200))).status == "Pending"


def test_checklist_keeps_caller_order() -> None:
    task = apply_checklist(_task(), [{"text": "b"}, {"text": "a", "completed": True}, {"text": "c"}])

    assert [i.text for i in task.todo_checklist] == ["b", "a", "c"]
    assert [i.position for i in task.todo_checklist] == [0, 1, 2]


def test_setting_completed_forces_checklist_and_progress() -> None:
    task = _task(progress=0)
    task.todo_checklist = [TodoItem(text="a", completed=False), TodoItem(text="b", completed=False)]

    apply_status(task, "Completed")

    assert task.status == "Completed"
    assert task.progress == 100
    assert all(item.completed for item in task.todo_checklist)


def test_setting_completed_on_empty_checklist_still_reaches_100() -> None:
    task = apply_status(_task(progress=0), "Completed")

    assert task.progress == 100


def test_setting_pending_or_in_progress_leaves_progress_alone() -> None:
    task = _task(status="Completed", progress=100)
    task.todo_checklist = [TodoItem(text="a", completed=True)]

    apply_status(task, "Pending")
    assert task.status == "Pending"
    assert task.progress == 100
    assert task.todo_checklist[0].completed is True

    apply_status(task, "In Progress")
    assert task.status == "In Progress"
    assert task.progress == 100


def test_missing_status_keeps_current_one() -> None:
    task = apply_status(_task(status="In Progress", progress=30), None)

    assert task.status == "In Progress"
    assert task.progress == 30


def test_checklist_update_is_persisted(db) -> None:
    task = make_task(db, checklist=[("old", False)])

    apply_checklist_update(db, task, _items(True, True, False, False))
    db.expire_all()
    stored = db.get(Task, task.id)

    assert stored.progress == 50
    assert stored.status == "In Progress"
    assert [i.completed for i in stored.todo_checklist] == [True, True, False, False]


def test_status_update_is_persisted(db) -> None:
    task = make_task(db, checklist=[("a", False), ("b", True)], progress=50, status="In Progress")

    apply_status_update(db, task, "Completed")
    db.expire_all()
    stored = db.get(Task, task.id)

    assert stored.status == "Completed"
    assert stored.progress == 100
    assert all(i.completed for i in stored.todo_checklist)
