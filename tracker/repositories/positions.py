from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import desc
from tracker.models import Position, PositionStatus
from tracker.repositories.base import BaseRepository, RepositoryError
import logging

logger = logging.getLogger(__name__)


class PositionRepository(BaseRepository[Position]):
    def __init__(self, db: Session):
        super().__init__(db, Position)

    def get_positions(self, status: Optional[str] = None, ticker: Optional[str] = None) -> List[Position]:
        """
        Get positions, newest first, optionally filtered by status and ticker.
        """
        try:
            query = self.db.query(Position)

            if status:
                query = query.filter(Position.status == status.upper())
            if ticker:
                query = query.filter(Position.ticker == ticker.upper())

            return query.order_by(desc(Position.entry_date), desc(Position.id)).all()

        except SQLAlchemyError as e:
            logger.error(f"Error getting positions (status={status}, ticker={ticker}): {e}")
            raise RepositoryError("Failed to get positions") from e

    def get_open_positions(self) -> List[Position]:
        return self.get_positions(status=PositionStatus.OPEN)

    def get_closed_positions(self) -> List[Position]:
        return self.get_positions(status=PositionStatus.CLOSED)

    def get_latest_open(self, ticker: str) -> Optional[Position]:
        """
        Get the most recently opened OPEN position for a ticker.
        """
        try:
            return (
                self.db.query(Position)
                .filter(Position.ticker == ticker.upper())
                .filter(Position.status == PositionStatus.OPEN)
                .order_by(desc(Position.entry_date), desc(Position.id))
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error getting open position for {ticker}: {e}")
            raise RepositoryError(f"Failed to get open position for {ticker}") from e
