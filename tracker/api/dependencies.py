from typing import Callable, Dict

from fastapi import Depends
from sqlalchemy.orm import Session

from tracker.clients.yfinance_client import fetch_current_price, fetch_quote
from tracker.core.db import get_db
from tracker.managers.cache_manager import CacheManager
from tracker.repositories.factory import RepositoryFactory
from tracker.services.index_service import IndexSeriesCache
from tracker.services.positions_service import PositionService
from tracker.services.predictions_service import PredictionService
from tracker.services.watchlist_service import WatchlistService


def get_factory(db: Session = Depends(get_db)) -> RepositoryFactory:
    return RepositoryFactory(db)


def get_price_fetcher() -> Callable[[str], float]:
    return fetch_current_price


def get_quote_fetcher() -> Callable[[str], Dict]:
    return fetch_quote


def get_position_service(
        factory: RepositoryFactory = Depends(get_factory),
        price_fn: Callable[[str], float] = Depends(get_price_fetcher),
) -> PositionService:
    return PositionService(factory, quote_fn=price_fn)


def get_watchlist_service(
        factory: RepositoryFactory = Depends(get_factory),
        price_fn: Callable[[str], float] = Depends(get_price_fetcher),
) -> WatchlistService:
    return WatchlistService(factory, quote_fn=price_fn)


def get_prediction_service(factory: RepositoryFactory = Depends(get_factory)) -> PredictionService:
    return PredictionService(factory)


def get_index_cache() -> IndexSeriesCache:
    return IndexSeriesCache(CacheManager(prefix="index"))
