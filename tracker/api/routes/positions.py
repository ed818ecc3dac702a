from typing import Callable, Dict, List, Optional

from fastapi import APIRouter, Depends

from tracker.api.dependencies import get_position_service, get_quote_fetcher
from tracker.api.errors import persistence_failure
from tracker.api.routes.prices import quote_or_error
from tracker.repositories import RepositoryError
from tracker.schemas.positions import (
    PositionCreate,
    PositionOut,
    PositionUpdate,
    PriceUpdateResult,
    QuoteOut,
    SellRequest,
)
from tracker.services.positions_service import PositionService

router = APIRouter()


@router.get("", response_model=List[PositionOut])
def list_positions(
        status: Optional[str] = None,
        service: PositionService = Depends(get_position_service),
):
    """Return positions, newest first, optionally filtered by status."""
    try:
        return service.list_positions(status)
    except RepositoryError as e:
        raise persistence_failure("list positions", e)


@router.post("", response_model=PositionOut, status_code=201)
def open_position(
        payload: PositionCreate,
        service: PositionService = Depends(get_position_service),
):
    """Open a position; the current price is fetched when the provider answers."""
    try:
        return service.open_position(payload)
    except RepositoryError as e:
        raise persistence_failure("add position", e)


@router.post("/update-prices", response_model=List[PriceUpdateResult])
def update_prices(service: PositionService = Depends(get_position_service)):
    """Reprice every open position and report the outcome per position."""
    try:
        return service.refresh_all()
    except RepositoryError as e:
        raise persistence_failure("update prices", e)


@router.get("/current-price/{symbol}", response_model=QuoteOut)
def current_price(symbol: str, quote_fn: Callable[[str], Dict] = Depends(get_quote_fetcher)):
    """Latest quote for a symbol from the external provider."""
    return quote_or_error(symbol, quote_fn)


@router.patch("/{ticker}", response_model=PositionOut)
def update_position(
        ticker: str,
        payload: PositionUpdate,
        service: PositionService = Depends(get_position_service),
):
    """
    Partially update the latest open position for a ticker.
    Setting status to CLOSED closes it at the current price.
    """
    try:
        return service.update_position(ticker, payload)
    except RepositoryError as e:
        raise persistence_failure("update position", e)


@router.post("/{ticker}/refresh-price", response_model=PriceUpdateResult)
def refresh_price(ticker: str, service: PositionService = Depends(get_position_service)):
    """Reprice the latest open position for a ticker."""
    try:
        return service.refresh_price(ticker)
    except RepositoryError as e:
        raise persistence_failure("refresh price", e)


@router.post("/{ticker}/sell", response_model=PositionOut)
def sell_position(
        ticker: str,
        payload: SellRequest,
        service: PositionService = Depends(get_position_service),
):
    """Close the latest open position for a ticker at the given sell price."""
    try:
        return service.close_position(ticker, payload.sell_price)
    except RepositoryError as e:
        raise persistence_failure("sell position", e)


@router.delete("/{position_id}", response_model=PositionOut)
def delete_position(position_id: int, service: PositionService = Depends(get_position_service)):
    """Remove a position permanently."""
    try:
        return service.delete_position(position_id)
    except RepositoryError as e:
        raise persistence_failure("delete position", e)
