from datetime import datetime, time
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

import redis
from pydantic import BaseModel

from tracker.clients.yfinance_client import fetch_index_history
from tracker.core.config import settings
from tracker.core.exceptions import UpstreamUnavailable
from tracker.core.logger import logger
from tracker.core.timeutils import utcnow
from tracker.managers.cache_manager import CacheManager


class IndexPoint(BaseModel):
    date: str
    close: float


class CachedSeries(BaseModel):
    value: List[IndexPoint]
    fetched_at: datetime


def _parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def is_market_open(now: Optional[datetime] = None) -> bool:
    """Weekday inside the configured trading window, in the market's timezone."""
    tz = ZoneInfo(settings.MARKET_TIMEZONE)
    if now is None:
        local = datetime.now(tz)
    elif now.tzinfo is None:
        local = now.replace(tzinfo=ZoneInfo("UTC")).astimezone(tz)
    else:
        local = now.astimezone(tz)

    if local.weekday() >= 5:
        return False
    return _parse_hhmm(settings.MARKET_OPEN) <= local.time() <= _parse_hhmm(settings.MARKET_CLOSE)


class IndexSeriesCache:
    """
    Owns the single cached benchmark series.

    The entry is stored as {value, fetched_at}; readers refetch when it is
    missing or older than `max_age` seconds.
    """

    def __init__(
            self,
            cache: CacheManager,
            symbol: str = settings.INDEX_SYMBOL,
            period: str = settings.INDEX_PERIOD,
            max_age: int = settings.INDEX_CACHE_MAX_AGE,
            fetch_fn: Callable[..., List[dict]] = fetch_index_history,
            clock: Callable[[], datetime] = utcnow,
    ):
        self.cache = cache
        self.symbol = symbol
        self.period = period
        self.max_age = max_age
        self.fetch = fetch_fn
        self.clock = clock

    def read(self) -> Optional[CachedSeries]:
        data = self.cache.get(self.symbol, self.period)
        if not data:
            return None
        return CachedSeries.model_validate(data)

    def is_stale(self, entry: CachedSeries) -> bool:
        return (self.clock() - entry.fetched_at).total_seconds() > self.max_age

    def refresh(self) -> CachedSeries:
        rows = self.fetch(self.symbol, period=self.period)
        entry = CachedSeries(value=rows, fetched_at=self.clock())
        try:
            self.cache.set(entry.model_dump(mode="json"), self.symbol, self.period)
        except redis.RedisError as e:
            logger.warning(f"Could not store {self.symbol} series in cache: {e}")
        logger.info(f"Refreshed {self.symbol} series ({len(entry.value)} points)")
        return entry

    def get_series(self, force: bool = False) -> List[IndexPoint]:
        entry = None
        if not force:
            try:
                entry = self.read()
            except redis.RedisError as e:
                logger.warning(f"Cache read failed for {self.symbol}: {e}")

        if entry is not None and not self.is_stale(entry):
            return entry.value

        try:
            return self.refresh().value
        except UpstreamUnavailable as e:
            if entry is not None:
                logger.warning(f"Serving stale {self.symbol} series: {e}")
                return entry.value
            logger.warning(f"No {self.symbol} series available: {e}")
            return []
