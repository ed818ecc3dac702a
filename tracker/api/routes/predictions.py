from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query

from tracker.api.dependencies import get_prediction_service
from tracker.api.errors import persistence_failure
from tracker.repositories import RepositoryError
from tracker.schemas.predictions import PredictionIn, PredictionOut
from tracker.services.predictions_service import PredictionService

router = APIRouter()


@router.post("/receive", response_model=List[PredictionOut], status_code=201)
def receive_predictions(
        payload: Union[PredictionIn, List[PredictionIn]],
        service: PredictionService = Depends(get_prediction_service),
):
    """Store one forecast record or a batch of them."""
    payloads = payload if isinstance(payload, list) else [payload]
    try:
        return service.receive(payloads)
    except RepositoryError as e:
        raise persistence_failure("store predictions", e)


@router.get("/history", response_model=List[PredictionOut])
def prediction_history(
        start_date: Optional[str] = Query(default=None, alias="startDate"),
        end_date: Optional[str] = Query(default=None, alias="endDate"),
        symbol: Optional[str] = None,
        service: PredictionService = Depends(get_prediction_service),
):
    """Predictions received within the range, newest first."""
    try:
        return service.history(start_date, end_date, symbol)
    except RepositoryError as e:
        raise persistence_failure("fetch prediction history", e)


@router.get("/{symbol}", response_model=PredictionOut)
def latest_prediction(symbol: str, service: PredictionService = Depends(get_prediction_service)):
    """Most recent prediction for a symbol."""
    try:
        return service.latest(symbol)
    except RepositoryError as e:
        raise persistence_failure("fetch prediction", e)
