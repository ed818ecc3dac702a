from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from tracker.api.dependencies import get_factory, get_index_cache
from tracker.api.errors import persistence_failure
from tracker.repositories import RepositoryError, RepositoryFactory
from tracker.schemas.portfolio import PerformancePoint, PerformanceResponse, PortfolioResponse
from tracker.services.index_service import IndexSeriesCache
from tracker.services.portfolio_service import (
    build_performance,
    build_performance_timeseries,
    build_portfolio_summary,
)

router = APIRouter()


@router.get("/portfolio", response_model=PortfolioResponse)
def get_portfolio(factory: RepositoryFactory = Depends(get_factory)):
    """All positions with aggregate statistics. An empty portfolio is not an error."""
    try:
        positions = factory.get_position_repository().get_positions()
        return {"positions": positions, "summary": build_portfolio_summary(positions)}
    except RepositoryError as e:
        raise persistence_failure("retrieve portfolio", e)


@router.get("/performance", response_model=PerformanceResponse)
def get_performance(factory: RepositoryFactory = Depends(get_factory)):
    """Statistics over closed positions."""
    try:
        closed = factory.get_position_repository().get_closed_positions()
        return {**build_performance(closed), "closed_positions": closed}
    except RepositoryError as e:
        raise persistence_failure("calculate performance", e)


@router.get("/performance/timeseries", response_model=List[PerformancePoint])
def get_performance_timeseries(
        start_date: Optional[date] = Query(default=None, alias="startDate"),
        end_date: Optional[date] = Query(default=None, alias="endDate"),
        factory: RepositoryFactory = Depends(get_factory),
        index_cache: IndexSeriesCache = Depends(get_index_cache),
):
    """
    Daily cumulative average return of closed trades, next to the benchmark
    index return over the same window.
    """
    try:
        closed = factory.get_position_repository().get_closed_positions()
    except RepositoryError as e:
        raise persistence_failure("calculate performance timeseries", e)

    benchmark = [point.model_dump() for point in index_cache.get_series()]
    return build_performance_timeseries(closed, benchmark, start_date, end_date)
