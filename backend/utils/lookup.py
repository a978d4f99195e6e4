# backend/utils/lookup.py
from typing import Optional

from sqlalchemy.orm import Session

from models.task import Task
from models.users import User
from utils.errors import NotFound

MAX_ID = 2 ** 63 - 1


def parse_id(raw) -> Optional[int]:
    """Return the integer id, or None when ``raw`` is not a well-formed identifier."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    elif isinstance(raw, str) and raw.isascii() and raw.isdigit():
        value = int(raw)
    else:
        return None
    if value <= 0 or value > MAX_ID:
        return None
    return value


# Malformed ids are reported exactly like missing records
def get_task_or_404(db: Session, raw_id) -> Task:
    task_id = parse_id(raw_id)
    task = db.get(Task, task_id) if task_id is not None else None
    if task is None:
        raise NotFound("Task not found")
    return task


def get_user_or_404(db: Session, raw_id) -> User:
    user_id = parse_id(raw_id)
    user = db.get(User, user_id) if user_id is not None else None
    if user is None:
        raise NotFound("User not found")
    return user
