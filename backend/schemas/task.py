from datetime import datetime, timezone
from typing import Annotated, Any, List, Literal, Optional

from pydantic import AfterValidator, BeforeValidator, Field

from schemas.user import CamelModel, UserSummary

Priority = Literal["Low", "Medium", "High"]
Status = Literal["Pending", "In Progress", "Completed"]


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _require_id_list(value: Any) -> Any:
    if not isinstance(value, list):
        raise ValueError("assignedTo must be an array of user IDs")
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_naive_utc)]
UserIdList = Annotated[List[int], BeforeValidator(_require_id_list)]


class TodoItemIn(CamelModel):
    text: str = Field(..., min_length=1)
    completed: bool = False


class TodoItemOut(CamelModel):
    text: str
    completed: bool


# Input schema for creating a task (admin only)
class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: Priority = "Low"
    due_date: UtcDatetime
    assigned_to: UserIdList
    attachments: List[str] = []
    todo_check_list: List[TodoItemIn] = []


# Partial update of core fields; status and checklist go through the status engine
class TaskUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[UtcDatetime] = None
    assigned_to: Optional[UserIdList] = None
    attachments: Optional[List[str]] = None
    todo_check_list: Optional[List[TodoItemIn]] = None
    status: Optional[Status] = None


class TaskStatusUpdate(CamelModel):
    status: Optional[Status] = None


class TaskChecklistUpdate(CamelModel):
    todo_check_list: List[TodoItemIn]


# Output schema representing a task with resolved assignees
class TaskResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    priority: Priority
    status: Status
    due_date: datetime
    assigned_to: List[UserSummary] = []
    created_by: Optional[int] = None
    attachments: List[str] = []
    todo_check_list: List[TodoItemOut] = []
    progress: int
    completed_task_count: int = 0
    created_at: datetime
    updated_at: datetime


class StatusSummary(CamelModel):
    all: int
    pending: int
    in_progress: int
    completed: int


class TaskListResponse(CamelModel):
    tasks: List[TaskResponse]
    status_summary: StatusSummary


class TaskEnvelope(CamelModel):
    message: Optional[str] = None
    task: TaskResponse
