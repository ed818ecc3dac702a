from typing import List

from fastapi import APIRouter, Depends

from tracker.api.dependencies import get_watchlist_service
from tracker.api.errors import persistence_failure
from tracker.repositories import RepositoryError
from tracker.schemas.watchlist import WatchlistCreate, WatchlistOut, WatchlistUpdate
from tracker.services.watchlist_service import WatchlistService

router = APIRouter()


@router.get("", response_model=List[WatchlistOut])
def list_watchlist(service: WatchlistService = Depends(get_watchlist_service)):
    try:
        return service.list_items()
    except RepositoryError as e:
        raise persistence_failure("fetch watchlist", e)


@router.post("", response_model=WatchlistOut, status_code=201)
def add_to_watchlist(payload: WatchlistCreate, service: WatchlistService = Depends(get_watchlist_service)):
    """Add a ticker with its fundamental score; duplicates are rejected."""
    try:
        return service.add_item(payload)
    except RepositoryError as e:
        raise persistence_failure("add stock to watchlist", e)


@router.get("/pending/{stage}", response_model=List[str])
def pending_analysis(stage: str, service: WatchlistService = Depends(get_watchlist_service)):
    """Tickers ready for `stage` (technical or news): upstream done, this stage not."""
    try:
        return service.pending_for(stage)
    except RepositoryError as e:
        raise persistence_failure("fetch pending stocks", e)


@router.get("/{ticker}", response_model=WatchlistOut)
def get_watchlist_item(ticker: str, service: WatchlistService = Depends(get_watchlist_service)):
    try:
        return service.get_item(ticker)
    except RepositoryError as e:
        raise persistence_failure("fetch watchlist item", e)


@router.patch("/{ticker}", response_model=WatchlistOut)
def update_watchlist_item(
        ticker: str,
        payload: WatchlistUpdate,
        service: WatchlistService = Depends(get_watchlist_service),
):
    """Record analysis scores; each supplied score marks its stage complete."""
    try:
        return service.update_item(ticker, payload)
    except RepositoryError as e:
        raise persistence_failure("update stock analysis", e)


@router.delete("/{ticker}")
def remove_from_watchlist(ticker: str, service: WatchlistService = Depends(get_watchlist_service)):
    try:
        removed = service.remove_item(ticker)
        return {"status": "ok", "ticker": removed}
    except RepositoryError as e:
        raise persistence_failure("remove stock from watchlist", e)
