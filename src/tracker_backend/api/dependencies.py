from fastapi import Depends
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from ..database import get_db
from ..notifications.hub import NotificationHub
from ..services.auth_service import AuthService
from ..services.comment_service import CommentService
from ..services.date_range_service import DateRangeService
from ..services.image_service import ImageService
from ..services.project_service import ProjectService
from ..services.storage_service import StorageService, get_storage_service
from ..services.task_service import TaskService


def get_notification_hub(connection: HTTPConnection) -> NotificationHub:
    """The process wide hub kept on the application state"""
    return connection.app.state.notification_hub


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_project_service(db: Session = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


def get_task_service(
    db: Session = Depends(get_db),
    hub: NotificationHub = Depends(get_notification_hub)
) -> TaskService:
    return TaskService(db, hub)


def get_comment_service(db: Session = Depends(get_db)) -> CommentService:
    return CommentService(db)


def get_date_range_service(db: Session = Depends(get_db)) -> DateRangeService:
    return DateRangeService(db)


def get_image_service(
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
) -> ImageService:
    return ImageService(db, storage)
