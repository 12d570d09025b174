from typing import List
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..model.image import Image


class ImageRepository(BaseRepository[Image]):
    """Repository for image metadata."""

    def __init__(self, db: Session):
        super().__init__(db, Image)

    def list_by(self, **criteria) -> List[Image]:
        query = self.db.query(Image)
        for key, value in criteria.items():
            query = query.filter(getattr(Image, key) == value)
        return query.order_by(Image.created_at.desc()).all()
