from datetime import datetime

import pytest

from tracker.core.celery_app import beat_schedule
from tracker.models import Position, PositionStatus
from tracker.repositories import BaseRepository


def test_normalize_header():
    assert BaseRepository.normalize_header(" LSTM Model ") == "lstm_model"
    assert BaseRepository.normalize_header({"Random-Forest": 1, "svm": 2}) == {"random_forest": 1, "svm": 2}
    assert BaseRepository.normalize_header(None) is None
    with pytest.raises(TypeError):
        BaseRepository.normalize_header(42)


def test_create_many_drops_unknown_columns(factory):
    repo = factory.get_prediction_repository()
    rows = repo.create_many([
        {
            "symbol": "ABC",
            "target_date": datetime(2025, 4, 1),
            "forecasts": {"svm": {"price": 1.0}},
            "confidence": 0.9,
        }
    ])
    assert len(rows) == 1
    assert rows[0].id is not None
    assert rows[0].received_at is not None


def test_factory_reuses_repositories(factory):
    assert factory.get_position_repository() is factory.get_position_repository()


def test_latest_open_ignores_closed(factory):
    repo = factory.get_position_repository()
    repo.create(Position(ticker="ABC", entry_price=10, timeframe="short", status=PositionStatus.OPEN,
                         entry_date=datetime(2025, 1, 1)))
    repo.create(Position(ticker="ABC", entry_price=12, timeframe="short", status=PositionStatus.CLOSED,
                         entry_date=datetime(2025, 2, 1)))

    assert repo.get_latest_open("abc").entry_price == 10
    assert [p.status for p in repo.get_positions(ticker="ABC")] == ["CLOSED", "OPEN"]


def test_beat_schedule_intervals():
    schedule = beat_schedule()
    assert schedule["refresh-benchmark-index"]["task"] == "tracker.tasks.refresh.refresh_index_series_task"
    assert schedule["refresh-benchmark-index"]["schedule"] == 15 * 60
    assert schedule["refresh-open-position-prices"]["schedule"] == 5 * 60
