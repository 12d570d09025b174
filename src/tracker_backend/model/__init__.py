from .base import Base, metadata
from .auth import User
from .project import Project, project_member
from .task import Task, TaskDateRange
from .comment import Comment
from .image import Image

__all__ = [
    'Base',
    'metadata',
    'User',
    'Project',
    'project_member',
    'Task',
    'TaskDateRange',
    'Comment',
    'Image',
]
