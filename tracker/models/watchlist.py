from sqlalchemy import Column, String, DateTime, Numeric, Boolean, Text
from tracker.core.db import Base
from tracker.core.timeutils import utcnow


class WatchlistItem(Base):
    __tablename__ = "watchlist"

    ticker = Column(String, primary_key=True, nullable=False)
    current_price = Column(Numeric(20, 8, asdecimal=False), nullable=True)

    fundamental_score = Column(Numeric(10, 4, asdecimal=False), nullable=False)
    technical_score = Column(Numeric(10, 4, asdecimal=False), nullable=True)
    news_score = Column(Numeric(10, 4, asdecimal=False), nullable=True)

    fundamental_done = Column(Boolean, nullable=False, default=True)
    technical_done = Column(Boolean, nullable=False, default=False)
    news_done = Column(Boolean, nullable=False, default=False)

    notes = Column(Text, nullable=False, default="")
    added_date = Column(DateTime, nullable=False, default=utcnow)
    last_updated = Column(DateTime, nullable=False, default=utcnow)

    @property
    def analysis_status(self) -> dict:
        return {
            "fundamental": bool(self.fundamental_done),
            "technical": bool(self.technical_done),
            "news": bool(self.news_done),
        }
