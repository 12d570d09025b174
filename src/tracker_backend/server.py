import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from tracker_backend.api.auth import auth_router, me_router
from tracker_backend.api.images import image_router
from tracker_backend.api.projects import project_router
from tracker_backend.api.tasks import task_router
from tracker_backend.api.websocket import websocket_router
from tracker_backend.database import init_db
from tracker_backend.notifications.hub import NotificationHub
from tracker_backend.repositories.base import DuplicateError, RepositoryError
from tracker_backend.settings import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DEBUG_MODE != "production":
        # Production schemas are managed by alembic
        init_db()
    logger.info(f"Task tracker backend started ({settings.DEBUG_MODE})")
    yield
    logger.info("Task tracker backend stopped")


app = FastAPI(lifespan=lifespan, title="Task Tracker API")

# Single broadcast hub for the process lifetime
app.state.notification_hub = NotificationHub()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors(), custom_encoder={Exception: str})},
    )


@app.exception_handler(RepositoryError)
async def repository_error_handler(request: Request, exc: RepositoryError):
    if isinstance(exc, DuplicateError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": f"{exc.entity_type} already exists"},
        )
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
def root():
    return "Task tracker API"


app.include_router(auth_router, prefix="/api")
app.include_router(me_router, prefix="/api")
app.include_router(project_router, prefix="/api")
app.include_router(task_router, prefix="/api")
app.include_router(image_router, prefix="/api")
app.include_router(websocket_router)
