from typing import List, Optional
from datetime import datetime

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import desc
from tracker.models import Prediction
from tracker.repositories.base import BaseRepository, RepositoryError
import logging

logger = logging.getLogger(__name__)


class PredictionRepository(BaseRepository[Prediction]):
    def __init__(self, db: Session):
        super().__init__(db, Prediction)

    def get_latest_for_symbol(self, symbol: str) -> Optional[Prediction]:
        """
        Get the most recently received prediction for a symbol.
        """
        try:
            return (
                self.db.query(Prediction)
                .filter(Prediction.symbol == symbol.upper())
                .order_by(desc(Prediction.received_at), desc(Prediction.id))
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error getting latest prediction for {symbol}: {e}")
            raise RepositoryError(f"Failed to get latest prediction for {symbol}") from e

    def get_history(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        symbol: Optional[str] = None,
    ) -> List[Prediction]:
        """
        Get predictions received within a time range, newest first.
        """
        try:
            query = self.db.query(Prediction)

            if date_from:
                query = query.filter(Prediction.received_at >= date_from)
            if date_to:
                query = query.filter(Prediction.received_at <= date_to)
            if symbol:
                query = query.filter(Prediction.symbol == symbol.upper())

            return query.order_by(desc(Prediction.received_at), desc(Prediction.id)).all()

        except SQLAlchemyError as e:
            logger.error(f"Error getting prediction history: {e}")
            raise RepositoryError("Failed to get prediction history") from e
