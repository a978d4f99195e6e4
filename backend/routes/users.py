# backend/routes/users.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.user import UserResponse, UserWithTaskCounts
from utils.dashboard import status_counts_by_user
from utils.lookup import get_user_or_404
from utils.policy import Action, Actor, authorize
from utils.tokenJWT import get_current_actor

router = APIRouter(prefix="/api/user", tags=["Users"])


# Regular users with their assignment counts (Admin only)
@router.get("/", response_model=List[UserWithTaskCounts])
def list_users(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.LIST_USERS)

    users = db.query(User).filter(User.role == "user").order_by(User.id.asc()).all()
    counts = status_counts_by_user(db, [u.id for u in users])

    return [
        UserWithTaskCounts(
            id=u.id,
            name=u.name,
            email=u.email,
            role=u.role,
            profile_image_url=u.profile_image_url,
            created_at=u.created_at,
            updated_at=u.updated_at,
            pending_tasks=counts[u.id]["pendingTasks"],
            in_progress_tasks=counts[u.id]["inProgressTasks"],
            completed_tasks=counts[u.id]["completedTasks"],
        )
        for u in users
    ]


# Single user by id (Admin only)
@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorize(actor, Action.READ_USER)
    return get_user_or_404(db, user_id)
