# tests/test_reports.py

from __future__ import annotations

from io import BytesIO

import pandas as pd
from sqlalchemy.exc import OperationalError

from models.task import Task
from utils.dashboard import status_counts_by_user
from utils.reports import TASK_COLUMNS, XLSX_MEDIA_TYPE, rows_to_xlsx, task_report_rows, user_report_rows

from .conftest import auth, make_task


def test_task_rows_render_assignees(db, admin, user) -> None:
    make_task(db, title="Assigned", assigned_to=[admin.id, user.id])
    make_task(db, title="Nobody", assigned_to=[])

    rows = {r["title"]: r for r in task_report_rows(db.query(Task).all())}

    assert rows["Assigned"]["assignedTo"] == "Admin User (admin@example.com), Normal User (user@example.com)"
    assert rows["Nobody"]["assignedTo"] == "Unassigned"


def test_dangling_assignee_counts_as_unassigned(db) -> None:
    make_task(db, title="Ghost", assigned_to=[987654])

    (row,) = task_report_rows(db.query(Task).all())

    assert row["assignedTo"] == "Unassigned"


def test_user_rows_use_status_counts(db, admin, user) -> None:
    make_task(db, status="Pending", assigned_to=[admin.id])
    make_task(db, status="Completed", assigned_to=[admin.id])

    users = [admin, user]
    rows = user_report_rows(users, status_counts_by_user(db, [u.id for u in users]))

    assert rows[0]["email"] == "admin@example.com"
    assert (rows[0]["taskCount"], rows[0]["pendingTasks"], rows[0]["inProgressTasks"], rows[0]["completedTask"]) == (2, 1, 0, 1)
    assert rows[1]["taskCount"] == 0


def test_rows_to_xlsx_writes_headers(db) -> None:
    make_task(db, title="Sheet me")
    content = rows_to_xlsx(task_report_rows(db.query(Task).all()), TASK_COLUMNS, "Tasks Report")

    sheet = pd.read_excel(BytesIO(content), engine="openpyxl")

    assert list(sheet.columns) == [header for _, header in TASK_COLUMNS]
    assert sheet.loc[0, "Title"] == "Sheet me"


def test_admin_exports_tasks(client, admin, db) -> None:
    make_task(db)

    res = client.get("/api/report/export/tasks", headers=auth(admin))

    assert res.status_code == 200
    assert res.headers["content-type"].startswith(XLSX_MEDIA_TYPE)
    assert "tasks_report.xlsx" in res.headers["content-disposition"]
    assert res.content[:2] == b"PK"


def test_admin_exports_users(client, admin) -> None:
    res = client.get("/api/report/export/users", headers=auth(admin))

    assert res.status_code == 200
    assert "users_report.xlsx" in res.headers["content-disposition"]


def test_exports_are_admin_only(client, user) -> None:
    assert client.get("/api/report/export/tasks").status_code == 401
    assert client.get("/api/report/export/tasks", headers=auth(user)).status_code == 403
    assert client.get("/api/report/export/users", headers=auth(user)).status_code == 403


def test_export_storage_failure(client, admin, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("User DB error"))

    monkeypatch.setattr("routes.reports.status_counts_by_user", broken)

    res = client.get("/api/report/export/users", headers=auth(admin))

    assert res.status_code == 500
    assert "User DB error" in res.json()["error"]
