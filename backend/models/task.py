# backend/models/task.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, CheckConstraint
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship

from database import Base
from models.users import User, utcnow

TASK_PRIORITIES = ("Low", "Medium", "High")
TASK_STATUSES = ("Pending", "In Progress", "Completed")


# A single task with its checklist, assignees and derived progress
class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    priority = Column(String, nullable=False, default="Low", index=True)
    status = Column(String, nullable=False, default="Pending", index=True)
    due_date = Column(DateTime, nullable=False, index=True)

    # Only admins create tasks; deleting the admin removes them explicitly
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Ordered list of attachment links
    attachments = Column(JSON, nullable=False, default=list)

    progress = Column(Integer, CheckConstraint("progress >= 0 AND progress <= 100"), nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    assignees = relationship(
        "TaskAssignee",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskAssignee.id",
        lazy="selectin",
    )
    todo_checklist = relationship(
        "TodoItem",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TodoItem.position",
        collection_class=ordering_list("position"),
        lazy="selectin",
    )

    @property
    def assigned_to(self) -> list:
        return [a.user_id for a in self.assignees]

    def set_assignees(self, user_ids) -> None:
        """Replace assignees, keeping first occurrence order and dropping duplicates."""
        seen = []
        for uid in user_ids:
            if uid not in seen:
                seen.append(uid)
        kept = {a.user_id: a for a in self.assignees if a.user_id in seen}
        self.assignees = [kept.get(uid) or TaskAssignee(user_id=uid) for uid in seen]

    def is_assigned(self, user_id: int) -> bool:
        return user_id in self.assigned_to

    @property
    def completed_todo_count(self) -> int:
        return sum(1 for item in self.todo_checklist if item.completed)


# Membership of a user in a task's assignedTo set.
# user_id carries no foreign key: references are not checked on write.
class TaskAssignee(Base):
    __tablename__ = "task_assignees"

    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)

    task = relationship("Task", back_populates="assignees")
    user = relationship(
        User,
        primaryjoin="foreign(TaskAssignee.user_id) == User.id",
        viewonly=True,
        lazy="joined",
        uselist=False,
    )


# Checklist entry; position keeps the caller's ordering
class TodoItem(Base):
    __tablename__ = "task_todos"

    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    text = Column(String, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)

    task = relationship("Task", back_populates="todo_checklist")
