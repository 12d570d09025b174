from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, generate_id, utc_now


project_member = Table(
    'project_member',
    Base.metadata,
    Column('project_id', ForeignKey('project.id', ondelete='CASCADE'), primary_key=True),
    Column('user_id', ForeignKey('user.id', ondelete='CASCADE'), primary_key=True, index=True),
    UniqueConstraint('project_id', 'user_id', name='project_member_project_id_user_id_key'),
)


class Project(Base):
    __tablename__ = 'project'

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(True), nullable=False, default=utc_now)
    name = Column(String(255), nullable=False)
    key = Column(String(10), nullable=False, unique=True)
    description = Column(Text)
    owner_id = Column(ForeignKey('user.id', ondelete='RESTRICT'), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="owned_projects", lazy="select")
    members = relationship("User", secondary=project_member, lazy="selectin", order_by="User.created_at")

    @property
    def member_ids(self) -> list:
        return [member.id for member in self.members]
