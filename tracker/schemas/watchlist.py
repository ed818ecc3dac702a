from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

PIPELINE_STAGES = ("technical", "news")


class WatchlistCreate(BaseModel):
    ticker: str
    fundamental_score: float
    notes: Optional[str] = None


class WatchlistUpdate(BaseModel):
    fundamental_score: Optional[float] = None
    technical_score: Optional[float] = None
    news_score: Optional[float] = None
    notes: Optional[str] = None


class WatchlistOut(BaseModel):
    ticker: str
    current_price: float | None
    fundamental_score: float | None
    technical_score: float | None
    news_score: float | None
    analysis_status: Dict[str, bool]
    notes: str
    added_date: datetime
    last_updated: datetime

    model_config = ConfigDict(from_attributes=True)
