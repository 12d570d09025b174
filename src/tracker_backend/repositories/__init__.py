"""
Repository pattern implementation for direct database access.
"""

from .base import BaseRepository, RepositoryError, DuplicateError
from .user import UserRepository
from .project import ProjectRepository
from .task import TaskRepository, DateRangeRepository
from .comment import CommentRepository
from .image import ImageRepository

__all__ = [
    'BaseRepository',
    'RepositoryError',
    'DuplicateError',
    'UserRepository',
    'ProjectRepository',
    'TaskRepository',
    'DateRangeRepository',
    'CommentRepository',
    'ImageRepository',
]
