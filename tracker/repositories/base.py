from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Optional, Type, TypeVar, Union

from slugify import slugify
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tracker.core.db import Base
from tracker.core.logger import logger

T = TypeVar("T", bound=Base)


class RepositoryError(Exception):
    """Raised when the store fails to read or write"""
    pass


class BaseRepository(Generic[T]):
    """
    Primary-key access and write helpers shared by every repository.

    Every write commits immediately; a failed write is rolled back and
    surfaces as RepositoryError.
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__name__

    @contextmanager
    def _writing(self, action: str) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error trying to {action} {self.name}: {e}")
            raise RepositoryError(f"Failed to {action} {self.name}") from e

    def get(self, id_: Union[int, str]) -> Optional[T]:
        try:
            return self.db.get(self.model, id_)
        except SQLAlchemyError as e:
            logger.error(f"Error getting {self.name} {id_}: {e}")
            raise RepositoryError(f"Failed to get {self.name}") from e

    def create(self, obj_in: Union[Dict[str, Any], T]) -> T:
        """Insert a transient instance, or one built from column values."""
        db_obj = obj_in if isinstance(obj_in, self.model) else self.model(**obj_in)
        with self._writing("create"):
            self.db.add(db_obj)
        self.db.refresh(db_obj)
        return db_obj

    def create_many(self, rows: List[Dict[str, Any]]) -> List[T]:
        """Insert several rows in one commit; unknown keys are dropped."""
        db_objs = [self.model(**row) for row in self._column_values(rows)]
        if not db_objs:
            return []
        with self._writing("create many"):
            self.db.add_all(db_objs)
        for db_obj in db_objs:
            self.db.refresh(db_obj)
        return db_objs

    def save(self, db_obj: T) -> T:
        with self._writing("save"):
            self.db.add(db_obj)
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, id_: Union[int, str]) -> bool:
        db_obj = self.get(id_)
        if db_obj is None:
            return False
        with self._writing("delete"):
            self.db.delete(db_obj)
        return True

    @staticmethod
    def normalize_header(value: Union[str, Dict[str, Any], None]) -> Union[str, Dict[str, Any], None]:
        """snake_case a name, or every key of a mapping ("LSTM Model" -> "lstm_model")."""
        if value is None:
            return None
        if isinstance(value, str):
            return slugify(value.strip(), separator="_", lowercase=True)
        if isinstance(value, dict):
            return {BaseRepository.normalize_header(k): v for k, v in value.items()}
        raise TypeError(f"Unsupported type for normalize_header: {type(value).__name__}")

    def _column_values(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        columns = {column.name for column in self.model.__table__.columns}
        cleaned = []
        for i, row in enumerate(rows):
            kept = {k: v for k, v in row.items() if k in columns}
            dropped = set(row) - set(kept)
            if dropped:
                logger.debug(f"{self.name} row {i}: ignoring {sorted(dropped)}")
            if kept:
                cleaned.append(kept)
            else:
                logger.warning(f"{self.name} row {i} has no known columns, skipping")
        return cleaned
