from typing import Callable, List

from tracker.clients.yfinance_client import fetch_current_price
from tracker.core.exceptions import NotFoundError, UpstreamUnavailable, ValidationError
from tracker.core.logger import logger
from tracker.core.timeutils import utcnow
from tracker.models import WatchlistItem
from tracker.repositories import RepositoryError, RepositoryFactory
from tracker.schemas.watchlist import PIPELINE_STAGES, WatchlistCreate, WatchlistUpdate

# score field -> completion flag it sets
STAGE_FLAGS = {
    "fundamental_score": "fundamental_done",
    "technical_score": "technical_done",
    "news_score": "news_done",
}


class WatchlistService:
    """Tracks candidate tickers through fundamental -> technical -> news analysis."""

    def __init__(self, factory: RepositoryFactory, quote_fn: Callable[[str], float] = fetch_current_price):
        self.repo = factory.get_watchlist_repository()
        self.quote = quote_fn

    def list_items(self) -> List[WatchlistItem]:
        return self.repo.get_watchlist()

    def get_item(self, ticker: str) -> WatchlistItem:
        item = self.repo.get_by_ticker(ticker)
        if item is None:
            raise NotFoundError(f"Stock {ticker.upper()} not found in watchlist")
        return item

    def add_item(self, payload: WatchlistCreate) -> WatchlistItem:
        ticker = (payload.ticker or "").strip().upper()
        if not ticker or payload.fundamental_score is None:
            raise ValidationError("Missing required fields: ticker and fundamental_score are required")
        if self.repo.get_by_ticker(ticker) is not None:
            raise ValidationError(f"Stock {ticker} already exists in watchlist")

        now = utcnow()
        item = WatchlistItem(
            ticker=ticker,
            fundamental_score=payload.fundamental_score,
            fundamental_done=True,
            technical_done=False,
            news_done=False,
            notes=payload.notes or "",
            added_date=now,
            last_updated=now,
        )

        try:
            item.current_price = self.quote(ticker)
        except UpstreamUnavailable as e:
            logger.warning(f"Could not fetch current price for watchlist entry {ticker}: {e}")

        try:
            created = self.repo.create(item)
        except RepositoryError as e:
            # lost a race with a concurrent add of the same ticker
            if self.repo.get_by_ticker(ticker) is not None:
                raise ValidationError(f"Stock {ticker} already exists in watchlist") from e
            raise
        logger.info(f"Added {ticker} to watchlist")
        return created

    def update_item(self, ticker: str, payload: WatchlistUpdate) -> WatchlistItem:
        item = self.get_item(ticker)
        updates = payload.model_dump(exclude_unset=True)

        for score_field, flag in STAGE_FLAGS.items():
            value = updates.get(score_field)
            if value is not None:
                setattr(item, score_field, value)
                setattr(item, flag, True)

        if updates.get("notes") is not None:
            item.notes = updates["notes"]

        item.last_updated = utcnow()
        return self.repo.save(item)

    def pending_for(self, stage: str) -> List[str]:
        stage = stage.lower()
        if stage not in PIPELINE_STAGES:
            raise ValidationError(f"Unknown analysis stage '{stage}', expected one of {list(PIPELINE_STAGES)}")
        return [item.ticker for item in self.repo.get_pending(stage)]

    def remove_item(self, ticker: str) -> str:
        removed = self.get_item(ticker).ticker
        self.repo.delete(removed)
        logger.info(f"Removed {removed} from watchlist")
        return removed
