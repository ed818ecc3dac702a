from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel


class ModelForecast(BaseModel):
    price: Optional[float] = None
    change: Optional[float] = None


class PredictionIn(BaseModel):
    symbol: str
    target_date: str
    # model name -> forecast; an "ensemble" key holds the combined forecast
    predictions: Dict[str, ModelForecast]


class PredictionOut(BaseModel):
    id: int
    symbol: str
    target_date: datetime
    received_at: datetime
    predictions: Dict[str, ModelForecast]

