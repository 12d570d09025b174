"""
Base repository pattern implementation.

Services talk to the database exclusively through repositories so that
SQLAlchemy failures surface as repository errors with a rolled back session.
"""

from abc import ABC
from typing import TypeVar, Generic, Optional, Dict, Any, Type
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import inspect

from ..model.base import utc_now

# Type variable for generic entity type
T = TypeVar('T')


class RepositoryError(Exception):
    """Base exception for repository operations."""
    pass


class DuplicateError(RepositoryError):
    """Exception raised when attempting to create duplicate entity."""

    def __init__(self, entity_type: str, criteria: Dict[str, Any]):
        super().__init__(f"{entity_type} already exists with criteria: {criteria}")
        self.entity_type = entity_type
        self.criteria = criteria


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize repository with database session and model class.

        Args:
            db: SQLAlchemy database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    def get_by_id_optional(self, entity_id: Any) -> Optional[T]:
        """Get entity by ID, returning None if not found."""
        return self.db.query(self.model).filter(
            self.model.id == entity_id
        ).first()

    def create(self, entity: T) -> T:
        """
        Create a new entity.

        Args:
            entity: Entity instance to create

        Returns:
            Created entity with generated fields populated

        Raises:
            DuplicateError: If entity violates unique constraints
            RepositoryError: If database operation fails
        """
        try:
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
            return entity
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError(
                self.model.__name__,
                self._extract_entity_dict(entity)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to create {self.model.__name__}: {str(e)}")

    def update(self, entity: T, updates: Dict[str, Any]) -> T:
        """
        Apply field updates to an already loaded entity and stamp updated_at.

        Args:
            entity: Loaded entity instance
            updates: Dictionary of fields to update

        Returns:
            Updated entity

        Raises:
            DuplicateError: If the update violates unique constraints
            RepositoryError: If update fails
        """
        try:
            for key, value in updates.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)
            if hasattr(entity, "updated_at"):
                entity.updated_at = utc_now()

            self.db.commit()
            self.db.refresh(entity)
            return entity
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError(self.model.__name__, updates)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to update {self.model.__name__}: {str(e)}")

    def delete(self, entity: T) -> bool:
        """
        Delete a loaded entity.

        Raises:
            RepositoryError: If deletion fails
        """
        try:
            self.db.delete(entity)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to delete {self.model.__name__}: {str(e)}")

    def find_one_by(self, **criteria) -> Optional[T]:
        """Find single entity by criteria."""
        query = self.db.query(self.model)

        for key, value in criteria.items():
            if hasattr(self.model, key):
                query = query.filter(getattr(self.model, key) == value)

        return query.first()

    def _extract_entity_dict(self, entity: T) -> Dict[str, Any]:
        mapper = inspect(entity)
        return {
            col.key: getattr(entity, col.key)
            for col in mapper.mapper.column_attrs
            if col.key != "password"
        }
