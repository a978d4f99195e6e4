# routes/reports.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from database import get_db
from models.task import Task
from models.users import User
from utils.dashboard import status_counts_by_user
from utils.policy import Action, Actor, authorize
from utils.reports import (
    TASK_COLUMNS, USER_COLUMNS, XLSX_MEDIA_TYPE,
    rows_to_xlsx, task_report_rows, user_report_rows,
)
from utils.tokenJWT import get_current_actor

router = APIRouter(prefix="/api/report", tags=["Reports"])


def _xlsx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# -----------------------------
# 1) Every task with its assignees
# -----------------------------
@router.get("/export/tasks")
def export_tasks_report(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.EXPORT_REPORTS)

    tasks = db.query(Task).order_by(Task.id.asc()).all()
    rows = task_report_rows(tasks)
    return _xlsx_response(rows_to_xlsx(rows, TASK_COLUMNS, "Tasks Report"), "tasks_report.xlsx")


# -----------------------------
# 2) Every user with task counts by status
# -----------------------------
@router.get("/export/users")
def export_users_report(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.EXPORT_REPORTS)

    users = db.query(User).order_by(User.id.asc()).all()
    counts = status_counts_by_user(db, [u.id for u in users])
    rows = user_report_rows(users, counts)
    return _xlsx_response(rows_to_xlsx(rows, USER_COLUMNS, "User Task Report"), "users_report.xlsx")
