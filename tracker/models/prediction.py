from sqlalchemy import Column, Integer, String, DateTime, Numeric, JSON
from tracker.core.db import Base
from tracker.core.timeutils import utcnow


class Prediction(Base):
    __tablename__ = "predictions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String, nullable=False, index=True)
    target_date = Column(DateTime, nullable=False)
    received_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    # {"svm": {"price": 101.2, "change": 1.2}, ...}
    forecasts = Column(JSON, nullable=False)
    ensemble_price = Column(Numeric(20, 8, asdecimal=False), nullable=True)
    ensemble_change = Column(Numeric(20, 8, asdecimal=False), nullable=True)
