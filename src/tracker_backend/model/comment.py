from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base, generate_id, utc_now


class Comment(Base):
    __tablename__ = 'comment'

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(True), nullable=False, default=utc_now)
    task_id = Column(String(36), nullable=False, index=True)
    author_id = Column(ForeignKey('user.id', ondelete='RESTRICT'), nullable=False)
    content = Column(Text, nullable=False)

    author = relationship("User", lazy="joined")
