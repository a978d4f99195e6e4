# tests/test_accounts.py

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from models.task import Task
from models.users import User
from utils.accounts import delete_account
from utils.image_host import resource_id_from_url

from .conftest import make_task, make_user


class FailOnUserDelete:
    """Session proxy whose final 'delete the user' step fails."""

    def __init__(self, session) -> None:
        self._session = session

    def __getattr__(self, name):
        return getattr(self._session, name)

    def delete(self, obj) -> None:
        if isinstance(obj, User):
            raise OperationalError("DELETE FROM users", {}, Exception("disk I/O error"))
        self._session.delete(obj)


def test_cascade_steps_are_not_rolled_back_on_failure(db, user) -> None:
    boss = make_user(db, "Boss", "boss@example.com", role="admin")
    boss_id = boss.id
    owned = make_task(db, created_by_id=boss_id)
    shared = make_task(db, assigned_to=[boss_id, user.id])
    owned_id, shared_id = owned.id, shared.id

    with pytest.raises(OperationalError):
        delete_account(FailOnUserDelete(db), boss)

    db.rollback()
    db.expire_all()
    # earlier steps stay applied while the user record survives
    assert db.get(Task, owned_id) is None
    assert db.get(Task, shared_id).assigned_to == [user.id]
    assert db.get(User, boss_id) is not None


def test_non_admin_deletion_keeps_tasks_they_created(db, user) -> None:
    # only admins create tasks through the API; a stray record must survive
    task = make_task(db, created_by_id=user.id, assigned_to=[user.id])
    task_id = task.id

    delete_account(db, user)

    db.expire_all()
    kept = db.get(Task, task_id)
    assert kept is not None
    assert kept.assigned_to == []


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://res.example.com/image/upload/v17/task-manager/abc123.jpg", "task-manager/abc123"),
        ("https://res.example.com/task-manager/photo.final.png", "task-manager/photo"),
        ("https://res.example.com/task-manager/noext", "task-manager/noext"),
        ("plain-name.jpeg", "task-manager/plain-name"),
    ],
)
def test_resource_id_from_url(url: str, expected: str) -> None:
    assert resource_id_from_url(url, "task-manager") == expected
