from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from tracker.schemas.positions import PositionOut


class PortfolioSummary(BaseModel):
    total_positions: int
    open_positions: int
    closed_positions: int
    total_invested: float
    current_value: float
    total_pnl: float
    win_rate: float
    best_percentage_return: float
    worst_percentage_return: float
    average_return: float


class PortfolioResponse(BaseModel):
    positions: List[PositionOut]
    summary: PortfolioSummary


class PerformanceResponse(BaseModel):
    total_trades: int
    total_profit: float
    win_rate: float
    best_percentage_return: float
    worst_percentage_return: float
    average_return: float
    closed_positions: List[PositionOut]


class PerformancePoint(BaseModel):
    date: date
    average_return: Optional[float]
    closed_trades: int
    benchmark_return: Optional[float]
