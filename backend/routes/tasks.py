# backend/routes/tasks.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from models.task import Task
from schemas.task import (
    TaskChecklistUpdate, TaskCreate, TaskEnvelope, TaskListResponse,
    TaskResponse, TaskStatusUpdate, TaskUpdate, TodoItemOut,
)
from schemas.user import MessageResponse, UserSummary
from utils.dashboard import build_dashboard, status_summary
from utils.lookup import get_task_or_404
from utils.policy import Action, Actor, authorize, task_scope, user_scope
from utils.task_status import apply_checklist, apply_checklist_update, apply_status_update
from utils.tokenJWT import get_current_actor

router = APIRouter(prefix="/api/task", tags=["Tasks"])


# Map Task model to TaskResponse schema, resolving assignees to user summaries
def _task_to_out(task: Task) -> TaskResponse:
    assigned = [
        UserSummary.model_validate(a.user)
        for a in task.assignees
        if a.user is not None
    ]
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        priority=task.priority,
        status=task.status,
        due_date=task.due_date,
        assigned_to=assigned,
        created_by=task.created_by_id,
        attachments=list(task.attachments or []),
        todo_check_list=[TodoItemOut(text=i.text, completed=i.completed) for i in task.todo_checklist],
        progress=task.progress,
        completed_task_count=task.completed_todo_count,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


# === Dashboards ===

@router.get("/dashboard")
def get_dashboard(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.VIEW_GLOBAL_DASHBOARD)
    return build_dashboard(db)


@router.get("/user-dashboard")
def get_user_dashboard(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.VIEW_OWN_DASHBOARD)
    return build_dashboard(db, user_scope(actor.id))


# === CRUD ===

@router.get("/", response_model=TaskListResponse)
def list_tasks(
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.LIST_TASKS)
    scope = task_scope(actor)

    query = db.query(Task)
    if scope is not None:
        query = query.filter(scope)
    if status_filter:
        query = query.filter(Task.status == status_filter)
    tasks = query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    # The summary covers the whole scope, independent of the status filter
    return TaskListResponse(
        tasks=[_task_to_out(t) for t in tasks],
        status_summary=status_summary(db, scope),
    )


@router.get("/{task_id}", response_model=TaskEnvelope)
def get_task(
    task_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    task = get_task_or_404(db, task_id)
    authorize(actor, Action.READ_TASK, task)
    return TaskEnvelope(task=_task_to_out(task))


@router.post("/", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.CREATE_TASK)

    task = Task(
        title=payload.title,
        description=payload.description,
        priority=payload.priority,
        due_date=payload.due_date,
        created_by_id=actor.id,
        attachments=list(payload.attachments),
    )
    task.set_assignees(payload.assigned_to)
    apply_checklist(task, payload.todo_check_list)

    db.add(task)
    db.commit()
    db.refresh(task)

    return TaskEnvelope(message="Task created successfully", task=_task_to_out(task))


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.UPDATE_TASK)
    task = get_task_or_404(db, task_id)

    changes = payload.model_dump(exclude_unset=True)
    for field in ("title", "description", "priority", "due_date", "attachments"):
        if field in changes and changes[field] is not None:
            setattr(task, field, changes[field])
    if payload.assigned_to is not None:
        task.set_assignees(payload.assigned_to)

    # Checklist first so an explicit status in the same request wins
    if payload.todo_check_list is not None:
        apply_checklist(task, payload.todo_check_list)
    if payload.status is not None:
        task = apply_status_update(db, task, payload.status)
    else:
        db.commit()
        db.refresh(task)

    return TaskEnvelope(message="Task updated successfully", task=_task_to_out(task))


@router.put("/{task_id}/status", response_model=TaskEnvelope)
def update_task_status(
    task_id: str,
    payload: TaskStatusUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    task = get_task_or_404(db, task_id)
    authorize(actor, Action.UPDATE_TASK_PROGRESS, task)

    task = apply_status_update(db, task, payload.status)
    return TaskEnvelope(message="Task updated successfully", task=_task_to_out(task))


@router.put("/{task_id}/todo", response_model=TaskEnvelope)
def update_task_checklist(
    task_id: str,
    payload: TaskChecklistUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    task = get_task_or_404(db, task_id)
    authorize(actor, Action.UPDATE_TASK_PROGRESS, task)

    task = apply_checklist_update(db, task, payload.todo_check_list)
    return TaskEnvelope(message="Task checklist updated successfully", task=_task_to_out(task))


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.DELETE_TASK)
    task = get_task_or_404(db, task_id)

    db.delete(task)
    db.commit()
    return {"message": "Task deleted successfully"}
