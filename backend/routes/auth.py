# backend/routes/auth.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from schemas import user as schemas
from utils.accounts import delete_account
from utils.errors import Conflict, NotFound, ValidationFailure
from utils.hashing import get_password_hash, verify_password
from utils.image_host import ALLOWED_IMAGE_TYPES, ImageHostClient, get_image_host
from utils.policy import Actor
from utils.tokenJWT import get_current_actor, token_for_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


def _role_from_invite(invite_token: Optional[str]) -> Optional[str]:
    if invite_token and settings.ADMIN_INVITE_TOKEN and invite_token == settings.ADMIN_INVITE_TOKEN:
        return "admin"
    return None


def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(User).filter(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _commit_user(db: Session, user: User) -> None:
    # The unique index still catches a concurrent registration of the same email
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User already exists")
    db.refresh(user)


def _auth_response(user: User) -> schemas.AuthResponse:
    return schemas.AuthResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        profile_image_url=user.profile_image_url,
        created_at=user.created_at,
        updated_at=user.updated_at,
        token=token_for_user(user),
    )


def _own_user(db: Session, actor: Actor) -> User:
    user = db.get(User, actor.id)
    if user is None:
        raise NotFound("User not found")
    return user


def _check_image(image: Optional[UploadFile]) -> UploadFile:
    if image is None or not image.filename:
        raise ValidationFailure("No file uploaded")
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationFailure("Only .jpeg, .jpg and .png formats are allowed")
    return image


# Register a new user
@router.post("/signup", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: schemas.UserCreate, db: Session = Depends(get_db)):
    normalized_email = payload.email.strip().lower()

    if _email_taken(db, normalized_email):
        raise Conflict("User already exists")

    user = User(
        name=payload.name,
        email=normalized_email,
        password_hash=get_password_hash(payload.password),
        profile_image_url=payload.profile_image_url,
        role=_role_from_invite(payload.admin_invite_token) or "user",
    )
    db.add(user)
    _commit_user(db, user)

    logger.info("Registered user %s with role %s", user.id, user.role)
    return _auth_response(user)


# Authenticate user and issue JWT token
@router.post("/signin", response_model=schemas.AuthResponse)
def signin(payload: schemas.UserLogin, db: Session = Depends(get_db)):
    if not payload.email or not payload.password:
        raise ValidationFailure("Email and password are required")

    user = db.query(User).filter(func.lower(User.email) == payload.email.strip().lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return _auth_response(user)


# Current user's own profile
@router.get("/profile", response_model=schemas.UserResponse)
def get_profile(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return _own_user(db, actor)


@router.put("/profile", response_model=schemas.AuthResponse)
def update_profile(
    payload: schemas.ProfileUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user = _own_user(db, actor)

    if payload.email is not None:
        normalized_email = payload.email.strip().lower()
        if _email_taken(db, normalized_email, exclude_id=user.id):
            raise Conflict("User already exists")
        user.email = normalized_email

    if payload.name is not None:
        user.name = payload.name
    if payload.profile_image_url is not None:
        user.profile_image_url = payload.profile_image_url
    if payload.password is not None:
        user.password_hash = get_password_hash(payload.password)

    promoted = _role_from_invite(payload.admin_invite_token)
    if promoted:
        user.role = promoted

    _commit_user(db, user)
    return _auth_response(user)


# Self-service account deletion with task cleanup
@router.delete("/profile", response_model=schemas.MessageResponse)
async def delete_profile(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    images: ImageHostClient = Depends(get_image_host),
):
    user = _own_user(db, actor)

    if user.profile_image_url:
        await images.delete([images.resource_id_for(user.profile_image_url)])

    delete_account(db, user)
    return {"message": "User deleted successfully"}


# Upload an image and hand back its public URL
@router.post("/upload-image", response_model=schemas.ImageUrlResponse)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    actor: Actor = Depends(get_current_actor),
    images: ImageHostClient = Depends(get_image_host),
):
    image = _check_image(image)
    url = await images.upload(image.filename, await image.read(), image.content_type)
    return {"image_url": url}


# Replace the current user's profile image
@router.put("/update-image", response_model=schemas.ImageUrlResponse)
async def update_image(
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
    images: ImageHostClient = Depends(get_image_host),
):
    user = _own_user(db, actor)

    if image is None or not image.filename:
        return {"image_url": user.profile_image_url}

    image = _check_image(image)

    if user.profile_image_url:
        await images.delete([images.resource_id_for(user.profile_image_url)])

    url = await images.upload(image.filename, await image.read(), image.content_type)
    user.profile_image_url = url
    db.commit()
    return {"image_url": url}
