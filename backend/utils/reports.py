# backend/utils/reports.py
"""Row shaping and xlsx rendering for the admin exports."""
from io import BytesIO
from typing import Dict, Iterable, List, Sequence, Tuple

import pandas as pd

from models.task import Task
from models.users import User

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (row key, column header) pairs in sheet order
TASK_COLUMNS: List[Tuple[str, str]] = [
    ("id", "Task ID"),
    ("title", "Title"),
    ("description", "Description"),
    ("priority", "Priority"),
    ("status", "Status"),
    ("dueDate", "Due Date"),
    ("assignedTo", "Assigned To"),
]

USER_COLUMNS: List[Tuple[str, str]] = [
    ("id", "User ID"),
    ("name", "User Name"),
    ("email", "Email"),
    ("taskCount", "Total Assigned Tasks"),
    ("pendingTasks", "Pending Tasks"),
    ("inProgressTasks", "In Progress Tasks"),
    ("completedTask", "Completed Tasks"),
]


def format_assignees(task: Task) -> str:
    users = [a.user for a in task.assignees if a.user is not None]
    if not users:
        return "Unassigned"
    return ", ".join(f"{u.name} ({u.email})" for u in users)


def task_report_rows(tasks: Iterable[Task]) -> List[dict]:
    return [
        {
            "id": task.id,
            "title": task.title,
            "description": task.description or "",
            "priority": task.priority,
            "status": task.status,
            "dueDate": task.due_date.date().isoformat() if task.due_date else "",
            "assignedTo": format_assignees(task),
        }
        for task in tasks
    ]


def user_report_rows(users: Iterable[User], counts: Dict[int, dict]) -> List[dict]:
    rows = []
    for user in users:
        c = counts.get(user.id, {})
        rows.append({
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "taskCount": c.get("taskCount", 0),
            "pendingTasks": c.get("pendingTasks", 0),
            "inProgressTasks": c.get("inProgressTasks", 0),
            "completedTask": c.get("completedTasks", 0),
        })
    return rows


def rows_to_xlsx(rows: List[dict], columns: Sequence[Tuple[str, str]], sheet_name: str) -> bytes:
    keys = [key for key, _ in columns]
    df = pd.DataFrame(rows, columns=keys).rename(columns=dict(columns))
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()
