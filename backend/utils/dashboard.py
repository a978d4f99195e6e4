# backend/utils/dashboard.py
"""Task statistics for dashboards, user listings and reports."""
from datetime import datetime
from typing import Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.task import Task, TaskAssignee, TASK_PRIORITIES, TASK_STATUSES
from models.users import utcnow
from utils.task_status import PENDING, IN_PROGRESS, COMPLETED

RECENT_TASKS_LIMIT = 10


def _scoped(query, scope):
    return query.filter(scope) if scope is not None else query


def _grouped_counts(db: Session, column, scope) -> Dict[str, int]:
    query = _scoped(db.query(column, func.count(Task.id)), scope).group_by(column)
    return {key: count for key, count in query.all()}


def build_dashboard(db: Session, scope=None, now: Optional[datetime] = None) -> dict:
    """
    Statistics, chart data and latest tasks for the tasks matching ``scope``.

    ``scope`` is a SQL criterion on Task (None for every task). Overdue
    tasks are judged against ``now``, which defaults to the request time.
    """
    now = now or utcnow()

    by_status = _grouped_counts(db, Task.status, scope)
    by_priority = _grouped_counts(db, Task.priority, scope)

    total_tasks = _scoped(db.query(func.count(Task.id)), scope).scalar() or 0
    overdue_tasks = (
        _scoped(db.query(func.count(Task.id)), scope)
        .filter(Task.status != COMPLETED, Task.due_date < now)
        .scalar()
    ) or 0

    # Status names lose their whitespace: "In Progress" -> "InProgress"
    task_distribution = {"".join(s.split()): by_status.get(s, 0) for s in TASK_STATUSES}
    task_distribution["All"] = total_tasks

    task_priority_levels = {p: by_priority.get(p, 0) for p in TASK_PRIORITIES}

    recent = (
        _scoped(db.query(Task), scope)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .limit(RECENT_TASKS_LIMIT)
        .all()
    )

    return {
        "statistics": {
            "totalTasks": total_tasks,
            "pendingTasks": by_status.get(PENDING, 0),
            "inProgressTasks": by_status.get(IN_PROGRESS, 0),
            "completedTasks": by_status.get(COMPLETED, 0),
            "overDueTasks": overdue_tasks,
        },
        "charts": {
            "taskDistribution": task_distribution,
            "taskPriorityLevels": task_priority_levels,
        },
        "recentTasks": [
            {
                "id": t.id,
                "title": t.title,
                "status": t.status,
                "priority": t.priority,
                "dueDate": t.due_date,
                "createdAt": t.created_at,
            }
            for t in recent
        ],
    }


def status_summary(db: Session, scope=None) -> dict:
    by_status = _grouped_counts(db, Task.status, scope)
    return {
        "all": sum(by_status.values()),
        "pending": by_status.get(PENDING, 0),
        "inProgress": by_status.get(IN_PROGRESS, 0),
        "completed": by_status.get(COMPLETED, 0),
    }


def status_counts_by_user(db: Session, user_ids: Iterable[int]) -> Dict[int, dict]:
    """Per-user task counts by status, over tasks each user is assigned to."""
    user_ids = list(user_ids)
    counts = {
        uid: {"taskCount": 0, "pendingTasks": 0, "inProgressTasks": 0, "completedTasks": 0}
        for uid in user_ids
    }
    if not user_ids:
        return counts

    rows = (
        db.query(TaskAssignee.user_id, Task.status, func.count(func.distinct(Task.id)))
        .join(Task, Task.id == TaskAssignee.task_id)
        .filter(TaskAssignee.user_id.in_(user_ids))
        .group_by(TaskAssignee.user_id, Task.status)
        .all()
    )
    keys = {PENDING: "pendingTasks", IN_PROGRESS: "inProgressTasks", COMPLETED: "completedTasks"}
    for user_id, status, count in rows:
        entry = counts[user_id]
        entry["taskCount"] += count
        if status in keys:
            entry[keys[status]] += count
    return counts
