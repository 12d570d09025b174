from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text

from .base import Base, generate_id, utc_now


class Task(Base):
    __tablename__ = 'task'

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(True), nullable=False, default=utc_now)
    # No foreign key on project_id: deleting a project leaves its tasks in place.
    project_id = Column(String(36), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(String(32), nullable=False, default="ToDo")
    priority = Column(String(32), nullable=False, default="Medium")
    assignee_id = Column(String(36), index=True)
    reporter_id = Column(ForeignKey('user.id', ondelete='RESTRICT'), nullable=False)
    start_date = Column(DateTime(True))
    end_date = Column(DateTime(True))
    has_due_date = Column(Boolean, nullable=False, default=False)


class TaskDateRange(Base):
    __tablename__ = 'task_date_range'

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(True), nullable=False, default=utc_now)
    task_id = Column(String(36), nullable=False, unique=True)
    start_date = Column(DateTime(True), nullable=False)
    end_date = Column(DateTime(True), nullable=False)
