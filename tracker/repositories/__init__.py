from tracker.repositories.base import BaseRepository, RepositoryError
from tracker.repositories.positions import PositionRepository
from tracker.repositories.predictions import PredictionRepository
from tracker.repositories.watchlist import WatchlistRepository
from tracker.repositories.factory import RepositoryFactory

__all__ = [
    "BaseRepository",
    "RepositoryError",
    "PositionRepository",
    "PredictionRepository",
    "WatchlistRepository",
    "RepositoryFactory",
]
