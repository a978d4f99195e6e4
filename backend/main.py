# backend/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

load_dotenv()

from config import settings
from database import init_db
from utils.errors import ImageHostError

# Router imports
from routes.auth import router as auth_router
from routes.users import router as users_router
from routes.tasks import router as tasks_router
from routes.reports import router as reports_router

logger = logging.getLogger(__name__)


def setup_logging(level: str = settings.LOG_LEVEL) -> None:
    """Configure the root logger once, before the first request is served."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.captureWarnings(True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    logger.info("Task manager API started")
    yield


app = FastAPI(title="Task Manager API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL] if settings.CLIENT_URL != "*" else ["*"],
    allow_credentials=settings.CLIENT_URL != "*",
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


# Unexpected persistence errors surface as a generic failure with the raw message
@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Server error", "error": str(exc)})


@app.exception_handler(ImageHostError)
async def image_host_error_handler(request: Request, exc: ImageHostError):
    return JSONResponse(status_code=500, content={"detail": "Server error", "error": str(exc)})


# Payload shape errors share the 400 status of the other validation failures
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return JSONResponse(
        status_code=400,
        content={"detail": message, "errors": jsonable_errors(errors)},
    )


def jsonable_errors(errors):
    # ctx may hold exception instances, which are not JSON serialisable;
    # input holds the raw body when it could not be parsed, possibly not UTF-8
    cleaned = []
    for e in errors:
        item = {k: v for k, v in e.items() if k != "ctx"}
        if isinstance(item.get("input"), (bytes, bytearray)):
            item["input"] = bytes(item["input"]).decode("utf-8", "replace")
        cleaned.append(item)
    return jsonable_encoder(cleaned)


# Router registration
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tasks_router)
app.include_router(reports_router)

@app.get("/")
def read_root():
    return {"message": "Task Manager API is running"}
