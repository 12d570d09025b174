from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from .base import Base, generate_id, utc_now


class User(Base):
    __tablename__ = 'user'

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(True), nullable=False, default=utc_now)
    username = Column(String(255), unique=True, nullable=False)
    email = Column(String(320), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=False, default="")
    role = Column(String(32), nullable=False, default="Member")
    avatar = Column(String(2048), nullable=False, default="")

    # Relationships
    owned_projects = relationship("Project", back_populates="owner", uselist=True, lazy="select")
