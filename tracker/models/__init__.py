from tracker.models.position import Position, PositionStatus
from tracker.models.prediction import Prediction
from tracker.models.watchlist import WatchlistItem

__all__ = ["Position", "PositionStatus", "Prediction", "WatchlistItem"]
