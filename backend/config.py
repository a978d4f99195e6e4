# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    # Tokens stay valid for a week
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    DATABASE_URL: str = "sqlite:///./task_manager.db"

    # Shared secret that lets a signup or profile update claim the admin role
    ADMIN_INVITE_TOKEN: Optional[str] = None

    # Allowed CORS origin of the frontend
    CLIENT_URL: str = "*"

    # Image hosting service used for profile pictures
    IMAGE_HOST_URL: str = "http://127.0.0.1:9000"
    IMAGE_HOST_API_KEY: Optional[str] = None
    IMAGE_FOLDER: str = "task-manager"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
