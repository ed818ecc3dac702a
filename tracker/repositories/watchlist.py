from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import desc
from tracker.models import WatchlistItem
from tracker.repositories.base import BaseRepository, RepositoryError
import logging

logger = logging.getLogger(__name__)


class WatchlistRepository(BaseRepository[WatchlistItem]):
    # stage -> (upstream flag, own flag)
    STAGE_GATES = {
        "technical": ("fundamental_done", "technical_done"),
        "news": ("technical_done", "news_done"),
    }

    def __init__(self, db: Session):
        super().__init__(db, WatchlistItem)

    def get_by_ticker(self, ticker: str) -> Optional[WatchlistItem]:
        return self.get(ticker.strip().upper())

    def get_watchlist(self) -> List[WatchlistItem]:
        """
        Get all watchlist entries, most recently added first.
        """
        try:
            return (
                self.db.query(WatchlistItem)
                .order_by(desc(WatchlistItem.added_date), WatchlistItem.ticker)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error getting watchlist: {e}")
            raise RepositoryError("Failed to get watchlist") from e

    def get_pending(self, stage: str) -> List[WatchlistItem]:
        """
        Entries whose upstream stage is complete and whose `stage` is not.
        """
        upstream, own = self.STAGE_GATES[stage]
        try:
            return (
                self.db.query(WatchlistItem)
                .filter(getattr(WatchlistItem, upstream).is_(True))
                .filter(getattr(WatchlistItem, own).is_(False))
                .order_by(WatchlistItem.ticker)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error getting entries pending {stage} analysis: {e}")
            raise RepositoryError(f"Failed to get entries pending {stage} analysis") from e
