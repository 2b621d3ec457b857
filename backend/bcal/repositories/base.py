"""
Base repository with the write helpers shared by the user and calendar stores.

Every write commits on success and rolls back before re-raising as a
DatabaseException, so callers never see a session left in a failed state.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bcal.core.exceptions import DatabaseException
from bcal.core.logging import get_logger
from bcal.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository bound to one model class and one session.

    Example:
        class CalendarEntryRepository(BaseRepository[CalendarEntry]):
            def __init__(self, db: Session):
                super().__init__(CalendarEntry, db)
    """

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def get(self, id: str) -> Optional[ModelType]:
        try:
            return self.db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to get {self.model.__name__} with id {id}") from e

    def create(self, obj: ModelType) -> ModelType:
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
            return obj
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def update(self, obj: ModelType) -> ModelType:
        try:
            self.db.commit()
            self.db.refresh(obj)
            return obj
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update {self.model.__name__} {obj.id}: {e}")
            raise DatabaseException(f"Failed to update {self.model.__name__}") from e

    def delete(self, obj: ModelType) -> None:
        try:
            self.db.delete(obj)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete {self.model.__name__} {obj.id}: {e}")
            raise DatabaseException(f"Failed to delete {self.model.__name__}") from e
