# backend/utils/accounts.py
import logging

from sqlalchemy.orm import Session

from models.task import Task, TaskAssignee
from models.users import User

logger = logging.getLogger(__name__)


def delete_account(db: Session, user: User) -> None:
    """
    Delete ``user`` and clean up the tasks that reference it.

    Steps run in order and each one commits on its own:

    1. admins only: delete every task the user created
    2. remove the user from every task's assignedTo
    3. delete the user record

    There is no enclosing transaction. If a step fails, the earlier steps
    stay applied and the error propagates, so a retry of the same request
    resumes from where the data now stands.
    """
    user_id = user.id

    if user.is_admin:
        owned = db.query(Task).filter(Task.created_by_id == user_id).all()
        for task in owned:
            db.delete(task)
        db.commit()
        logger.info("Deleted %d task(s) created by admin %s", len(owned), user_id)

    removed = (
        db.query(TaskAssignee)
        .filter(TaskAssignee.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Removed user %s from %d task assignment(s)", user_id, removed)

    db.delete(user)
    db.commit()
    logger.info("Deleted user %s", user_id)
