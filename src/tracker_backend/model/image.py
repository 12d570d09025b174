from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, String

from .base import Base, generate_id, utc_now


class Image(Base):
    __tablename__ = 'image'

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(True), nullable=False, default=utc_now)
    filename = Column(String(255), nullable=False)
    original_filename = Column(String(255), nullable=False)
    content_type = Column(String(255), nullable=False)
    size = Column(BigInteger, nullable=False)
    url = Column(String(2048), nullable=False)
    bucket = Column(String(255), nullable=False)
    object_key = Column(String(1024), nullable=False)
    uploaded_by = Column(ForeignKey('user.id', ondelete='RESTRICT'), nullable=False, index=True)
    project_id = Column(String(36), index=True)
    task_id = Column(String(36), index=True)
