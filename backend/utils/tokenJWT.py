# utils/tokenJWT.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from utils.errors import AuthenticationFailure, CredentialExpired, CredentialInvalid, NotFound
from utils.policy import Actor

logger = logging.getLogger(__name__)

# Missing headers are reported by get_current_actor, not by HTTPBearer itself
bearer_scheme = HTTPBearer(auto_error=False)

# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta is not None else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def token_for_user(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role})

# Decode a bearer token into the subject's user id
def decode_subject(token: str) -> int:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("Rejected expired access token")
        raise CredentialExpired()
    except JWTError:
        logger.warning("Rejected access token with invalid signature or format")
        raise CredentialInvalid()

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise CredentialInvalid()
    return int(subject)

# Resolve the authenticated actor for the current request
def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Actor:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationFailure()

    user_id = decode_subject(credentials.credentials)

    # The role is read from the database so promotions take effect immediately
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return Actor(id=user.id, role=user.role)
