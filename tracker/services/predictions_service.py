from datetime import datetime, time, timedelta
from typing import Dict, List, Optional

from tracker.core.exceptions import NotFoundError, ValidationError
from tracker.core.logger import logger
from tracker.core.timeutils import parse_datetime, utcnow
from tracker.models import Prediction
from tracker.repositories import BaseRepository, RepositoryFactory
from tracker.schemas.predictions import PredictionIn, PredictionOut

ENSEMBLE_KEY = "ensemble"


def serialize_prediction(row: Prediction) -> PredictionOut:
    predictions = dict(row.forecasts or {})
    predictions[ENSEMBLE_KEY] = {"price": row.ensemble_price, "change": row.ensemble_change}
    return PredictionOut(
        id=row.id,
        symbol=row.symbol,
        target_date=row.target_date,
        received_at=row.received_at,
        predictions=predictions,
    )


class PredictionService:
    """Append-only store of per-model price forecasts."""

    def __init__(self, factory: RepositoryFactory):
        self.repo = factory.get_prediction_repository()

    @staticmethod
    def _to_row(payload: PredictionIn, received_at: datetime) -> Dict:
        symbol = (payload.symbol or "").strip().upper()
        if not symbol:
            raise ValidationError("symbol is required")

        target_date = parse_datetime(payload.target_date)
        if target_date is None:
            raise ValidationError(f"Unrecognized target_date '{payload.target_date}'")

        forecasts = {}
        for name, forecast in payload.predictions.items():
            key = BaseRepository.normalize_header(name)
            if key in forecasts:
                raise ValidationError(f"Duplicate model '{key}' in forecasts for {symbol}")
            forecasts[key] = forecast.model_dump()
        ensemble = forecasts.pop(ENSEMBLE_KEY, None) or {}
        if not forecasts and not ensemble:
            raise ValidationError(f"No model forecasts supplied for {symbol}")

        return {
            "symbol": symbol,
            "target_date": target_date,
            "received_at": received_at,
            "forecasts": forecasts,
            "ensemble_price": ensemble.get("price"),
            "ensemble_change": ensemble.get("change"),
        }

    def receive(self, payloads: List[PredictionIn]) -> List[PredictionOut]:
        if not payloads:
            raise ValidationError("No predictions supplied")
        received_at = utcnow()
        rows = [self._to_row(payload, received_at) for payload in payloads]
        created = self.repo.create_many(rows)
        logger.info(f"Stored {len(created)} predictions for {sorted({r['symbol'] for r in rows})}")
        return [serialize_prediction(row) for row in created]

    def latest(self, symbol: str) -> PredictionOut:
        row = self.repo.get_latest_for_symbol(symbol)
        if row is None:
            raise NotFoundError(f"No prediction found for {symbol.upper()}")
        return serialize_prediction(row)

    def history(
            self,
            start_date: Optional[str] = None,
            end_date: Optional[str] = None,
            symbol: Optional[str] = None,
    ) -> List[PredictionOut]:
        date_from = parse_datetime(start_date) if start_date else None
        date_to = parse_datetime(end_date) if end_date else None
        if start_date and date_from is None:
            raise ValidationError(f"Unrecognized startDate '{start_date}'")
        if end_date and date_to is None:
            raise ValidationError(f"Unrecognized endDate '{end_date}'")
        if date_to is not None and date_to.time() == time.min:
            # a bare date includes the whole day
            date_to = date_to + timedelta(days=1) - timedelta(microseconds=1)
        rows = self.repo.get_history(date_from=date_from, date_to=date_to, symbol=symbol)
        return [serialize_prediction(row) for row in rows]
