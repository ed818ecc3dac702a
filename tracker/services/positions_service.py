from typing import Callable, Iterable, List, Optional

from tracker.clients.yfinance_client import fetch_current_price
from tracker.core.exceptions import NotFoundError, UpstreamUnavailable, ValidationError
from tracker.core.logger import logger
from tracker.core.timeutils import to_naive_utc, utcnow
from tracker.models import Position, PositionStatus
from tracker.repositories import RepositoryError, RepositoryFactory
from tracker.schemas.positions import (
    TIMEFRAMES,
    PositionCreate,
    PositionOut,
    PositionUpdate,
    PriceUpdateResult,
)
from tracker.services.derived_fields import default_stop_loss, nearest_resistance_above, recompute


class PositionService:
    """Opens, reprices, updates and closes positions."""

    def __init__(self, factory: RepositoryFactory, quote_fn: Callable[[str], float] = fetch_current_price):
        self.repo = factory.get_position_repository()
        self.quote = quote_fn

    def list_positions(self, status: Optional[str] = None) -> List[Position]:
        if status and status.upper() not in PositionStatus.values():
            raise ValidationError(f"Invalid status '{status}', expected one of {PositionStatus.values()}")
        return self.repo.get_positions(status=status)

    def _try_fetch_price(self, ticker: str) -> Optional[float]:
        try:
            return self.quote(ticker)
        except UpstreamUnavailable as e:
            logger.warning(f"Could not fetch current price for {ticker}: {e}")
            return None

    def _get_open(self, ticker: str) -> Position:
        position = self.repo.get_latest_open(ticker)
        if position is None:
            raise NotFoundError(f"No open position found for {ticker.upper()}")
        return position

    def open_position(self, payload: PositionCreate) -> Position:
        ticker = (payload.ticker or "").strip().upper()
        if not ticker:
            raise ValidationError("ticker is required")
        if payload.entry_price is None or payload.entry_price <= 0:
            raise ValidationError("entry_price must be a positive number")
        if payload.timeframe not in TIMEFRAMES:
            raise ValidationError(f"timeframe must be one of {list(TIMEFRAMES)}")

        entry_price = float(payload.entry_price)
        stop_loss = payload.stop_loss
        if stop_loss is None:
            stop_loss = default_stop_loss(entry_price, payload.support_levels)
        take_profit = payload.take_profit
        if take_profit is None:
            take_profit = nearest_resistance_above(payload.resistance_levels, entry_price)

        now = utcnow()
        position = Position(
            ticker=ticker,
            entry_price=entry_price,
            current_price=payload.current_price,
            target_price=payload.target_price,
            stop_loss=stop_loss,
            take_profit=take_profit,
            entry_date=to_naive_utc(payload.entry_date) or now,
            target_date=to_naive_utc(payload.target_date),
            timeframe=payload.timeframe,
            status=PositionStatus.OPEN,
            pnl=0.0,
            profit_loss=0.0,
            last_updated=now,
            technical_score=payload.technical_score,
            fundamental_score=payload.fundamental_score,
            news_score=payload.news_score,
            support_levels=payload.support_levels,
            resistance_levels=payload.resistance_levels,
            trend=payload.trend.model_dump() if payload.trend else None,
            signals=payload.signals.model_dump() if payload.signals else None,
            notes=payload.notes,
        )

        price = self._try_fetch_price(ticker)
        if price is not None:
            position.current_price = price

        recompute(position)
        created = self.repo.create(position)
        logger.info(f"Opened position {created.id} for {ticker} at {entry_price}")
        return created

    def _apply_price(self, position: Position, price: float) -> PriceUpdateResult:
        position.current_price = price
        position.last_updated = utcnow()
        recompute(position, changed=("current_price",))
        saved = self.repo.save(position)
        return PriceUpdateResult(
            ticker=saved.ticker,
            position_id=saved.id,
            success=True,
            current_price=saved.current_price,
            pnl=saved.pnl,
        )

    def _refresh_one(self, position: Position) -> PriceUpdateResult:
        ticker, position_id = position.ticker, position.id
        try:
            price = self.quote(ticker)
            return self._apply_price(position, price)
        except (UpstreamUnavailable, RepositoryError) as e:
            logger.warning(f"Price refresh failed for {ticker} (position {position_id}): {e}")
            return PriceUpdateResult(
                ticker=ticker,
                position_id=position_id,
                success=False,
                current_price=position.current_price,
                pnl=position.pnl,
                error=str(e),
            )

    def refresh_price(self, ticker: str) -> PriceUpdateResult:
        return self._refresh_one(self._get_open(ticker))

    def refresh_all(self) -> List[PriceUpdateResult]:
        """Reprice every OPEN position; one failure never stops the sweep."""
        positions = self.repo.get_open_positions()
        results = [self._refresh_one(position) for position in positions]
        failed = sum(1 for r in results if not r.success)
        logger.info(f"Price sweep finished: {len(results) - failed} updated, {failed} failed")
        return results

    def _close(self, position: Position, sell_price: float, changed: Iterable[str] = ()) -> Position:
        now = utcnow()
        position.current_price = sell_price
        position.sell_price = sell_price
        position.status = PositionStatus.CLOSED
        position.sold_date = now
        position.last_updated = now
        recompute(position, changed={"current_price", *changed})
        saved = self.repo.save(position)
        logger.info(f"Closed position {saved.id} for {saved.ticker} at {sell_price} (pnl {saved.pnl:.2f}%)")
        return saved

    def close_position(self, ticker: str, sell_price: Optional[float]) -> Position:
        if sell_price is None:
            raise ValidationError("sell_price is required")
        if sell_price <= 0:
            raise ValidationError("sell_price must be a positive number")
        return self._close(self._get_open(ticker), float(sell_price))

    def update_position(self, ticker: str, payload: PositionUpdate) -> Position:
        updates = payload.model_dump(exclude_unset=True)
        status = updates.pop("status", None)
        if status is not None and status.upper() not in PositionStatus.values():
            raise ValidationError(f"Invalid status '{status}', expected one of {PositionStatus.values()}")

        position = self._get_open(ticker)
        closing = status is not None and status.upper() == PositionStatus.CLOSED
        if closing and updates.get("current_price", position.current_price) is None:
            raise ValidationError("A price is required to close a position")

        for field, value in updates.items():
            if field == "target_date":
                value = to_naive_utc(value)
            setattr(position, field, value)

        if closing:
            return self._close(position, position.current_price, changed=updates.keys())

        position.last_updated = utcnow()
        recompute(position, changed=updates.keys())
        return self.repo.save(position)

    def delete_position(self, position_id: int) -> PositionOut:
        position = self.repo.get(position_id)
        if position is None:
            raise NotFoundError(f"Position {position_id} not found")
        snapshot = PositionOut.model_validate(position)
        self.repo.delete(position_id)
        logger.info(f"Deleted position {position_id} ({snapshot.ticker})")
        return snapshot
