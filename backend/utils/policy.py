# backend/utils/policy.py
"""
Authorization policy.

Every route builds an ``Actor`` from the bearer token and passes it here
instead of branching on roles itself. Role-only actions are decided from the
actor alone; ownership actions need the task, so callers look the task up
first and a non-assignee gets ``AuthorizationDenied`` rather than a 404.
"""
import enum
from dataclasses import dataclass
from typing import Optional

from models.task import Task, TaskAssignee
from utils.errors import AuthorizationDenied

ADMIN_ONLY_MESSAGE = "Access denied, Only for admin"


@dataclass(frozen=True)
class Actor:
    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Action(str, enum.Enum):
    LIST_TASKS = "list_tasks"
    READ_TASK = "read_task"
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    UPDATE_TASK_PROGRESS = "update_task_progress"
    VIEW_GLOBAL_DASHBOARD = "view_global_dashboard"
    VIEW_OWN_DASHBOARD = "view_own_dashboard"
    LIST_USERS = "list_users"
    READ_USER = "read_user"
    EXPORT_REPORTS = "export_reports"


ADMIN_ONLY = {
    Action.CREATE_TASK,
    Action.UPDATE_TASK,
    Action.DELETE_TASK,
    Action.VIEW_GLOBAL_DASHBOARD,
    Action.LIST_USERS,
    Action.READ_USER,
    Action.EXPORT_REPORTS,
}

ASSIGNEE_OR_ADMIN = {
    Action.READ_TASK,
    Action.UPDATE_TASK_PROGRESS,
}


def authorize(actor: Actor, action: Action, task: Optional[Task] = None) -> None:
    """Raise AuthorizationDenied unless ``actor`` may perform ``action``."""
    if action in ADMIN_ONLY:
        if not actor.is_admin:
            raise AuthorizationDenied(ADMIN_ONLY_MESSAGE)
        return

    if action in ASSIGNEE_OR_ADMIN:
        if task is None:
            raise ValueError(f"{action.value} needs the target task")
        if not actor.is_admin and not task.is_assigned(actor.id):
            raise AuthorizationDenied()
        return

    # LIST_TASKS and VIEW_OWN_DASHBOARD are open to every actor;
    # their results are narrowed by task_scope().


def task_scope(actor: Actor):
    """SQL criterion for the tasks ``actor`` can see, None meaning all of them."""
    if actor.is_admin:
        return None
    return Task.assignees.any(TaskAssignee.user_id == actor.id)


def user_scope(user_id: int):
    """Tasks assigned to a given user, regardless of who is asking."""
    return Task.assignees.any(TaskAssignee.user_id == user_id)
