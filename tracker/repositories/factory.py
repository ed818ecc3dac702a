from typing import Dict, Type, TypeVar

from sqlalchemy.orm import Session

from tracker.repositories.base import BaseRepository
from tracker.repositories.positions import PositionRepository
from tracker.repositories.predictions import PredictionRepository
from tracker.repositories.watchlist import WatchlistRepository

R = TypeVar("R", bound=BaseRepository)


class RepositoryFactory:
    """Hands out one repository of each kind per database session."""

    def __init__(self, db: Session):
        self.db = db
        self._instances: Dict[type, BaseRepository] = {}

    def _get(self, repository_class: Type[R]) -> R:
        if repository_class not in self._instances:
            self._instances[repository_class] = repository_class(self.db)
        return self._instances[repository_class]

    def get_position_repository(self) -> PositionRepository:
        return self._get(PositionRepository)

    def get_watchlist_repository(self) -> WatchlistRepository:
        return self._get(WatchlistRepository)

    def get_prediction_repository(self) -> PredictionRepository:
        return self._get(PredictionRepository)
