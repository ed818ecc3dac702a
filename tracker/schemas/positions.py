from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field

TIMEFRAMES = ("short", "medium", "long", "1h", "1wk", "1mo")


class Trend(BaseModel):
    direction: Optional[str] = None
    strength: Optional[float] = None


class Signals(BaseModel):
    rsi: Optional[float] = None
    macd_signal: Optional[str] = None
    volume_profile: Optional[str] = None
    predicted_move: Optional[float] = None


class PositionCreate(BaseModel):
    ticker: str
    entry_price: float
    timeframe: str
    current_price: Optional[float] = None
    target_price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    entry_date: Optional[datetime] = None
    target_date: Optional[datetime] = None
    technical_score: Optional[float] = None
    fundamental_score: Optional[float] = None
    news_score: Optional[float] = None
    support_levels: Optional[List[float]] = None
    resistance_levels: Optional[List[float]] = None
    trend: Optional[Trend] = None
    signals: Optional[Signals] = None
    notes: Optional[str] = None


class PositionUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""
    current_price: Optional[float] = None
    target_price: Optional[float] = None
    target_date: Optional[datetime] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    technical_score: Optional[float] = None
    fundamental_score: Optional[float] = None
    news_score: Optional[float] = None
    support_levels: Optional[List[float]] = None
    resistance_levels: Optional[List[float]] = None
    trend: Optional[Trend] = None
    signals: Optional[Signals] = None
    notes: Optional[str] = None
    status: Optional[str] = None


class SellRequest(BaseModel):
    sell_price: Optional[float] = None


class PositionOut(BaseModel):
    id: int
    ticker: str
    entry_price: float
    current_price: float | None
    target_price: float | None
    stop_loss: float | None
    take_profit: float | None
    entry_date: datetime
    target_date: datetime | None
    timeframe: str
    status: str
    pnl: float
    profit_loss: float
    sell_price: float | None = None
    sold_date: datetime | None = None
    last_updated: datetime
    technical_score: float | None = None
    fundamental_score: float | None = None
    news_score: float | None = None
    support_levels: List[float] | None = None
    resistance_levels: List[float] | None = None
    trend: Trend | None = None
    signals: Signals | None = None
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def days_left(self) -> Optional[int]:
        if self.target_date is None:
            return None
        return (self.target_date.date() - date.today()).days


class PriceUpdateResult(BaseModel):
    ticker: str
    position_id: int
    success: bool
    current_price: Optional[float] = None
    pnl: Optional[float] = None
    error: Optional[str] = None


class QuoteOut(BaseModel):
    ticker: str
    price: float
    change: Optional[float] = None
    change_percent: Optional[float] = None
