from sqlalchemy import Column, Integer, String, DateTime, Numeric, JSON, Text, Index
from tracker.core.db import Base
from tracker.core.timeutils import utcnow


class PositionStatus:
    OPEN = "OPEN"
    CLOSED = "CLOSED"

    @classmethod
    def values(cls):
        return [cls.OPEN, cls.CLOSED]


class Position(Base):
    __tablename__ = "positions"
    __table_args__ = (Index("ix_positions_ticker_status", "ticker", "status"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticker = Column(String, nullable=False)
    entry_price = Column(Numeric(20, 8, asdecimal=False), nullable=False)
    current_price = Column(Numeric(20, 8, asdecimal=False), nullable=True)
    target_price = Column(Numeric(20, 8, asdecimal=False), nullable=True)
    stop_loss = Column(Numeric(20, 8, asdecimal=False), nullable=True)
    take_profit = Column(Numeric(20, 8, asdecimal=False), nullable=True)

    entry_date = Column(DateTime, nullable=False, default=utcnow)
    target_date = Column(DateTime, nullable=True)
    timeframe = Column(String, nullable=False)
    status = Column(String, nullable=False, default=PositionStatus.OPEN)

    pnl = Column(Numeric(20, 8, asdecimal=False), nullable=False, default=0.0)
    profit_loss = Column(Numeric(20, 8, asdecimal=False), nullable=False, default=0.0)

    sell_price = Column(Numeric(20, 8, asdecimal=False), nullable=True)
    sold_date = Column(DateTime, nullable=True)
    last_updated = Column(DateTime, nullable=False, default=utcnow)

    technical_score = Column(Numeric(10, 4, asdecimal=False), nullable=True)
    fundamental_score = Column(Numeric(10, 4, asdecimal=False), nullable=True)
    news_score = Column(Numeric(10, 4, asdecimal=False), nullable=True)
    support_levels = Column(JSON, nullable=True)
    resistance_levels = Column(JSON, nullable=True)
    trend = Column(JSON, nullable=True)
    signals = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
