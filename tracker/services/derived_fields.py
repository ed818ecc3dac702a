from typing import Iterable, Optional, Sequence

DEFAULT_STOP_LOSS_FACTOR = 0.95


def calculate_pnl_percent(entry_price: Optional[float], current_price: Optional[float]) -> Optional[float]:
    """(current - entry) / entry * 100, or None when either price is missing."""
    if entry_price is None or current_price is None or entry_price == 0:
        return None
    return (current_price - entry_price) / entry_price * 100


def nearest_support_below(levels: Optional[Sequence[float]], entry_price: float) -> Optional[float]:
    below = [float(level) for level in (levels or []) if level is not None and float(level) < entry_price]
    return max(below) if below else None


def nearest_resistance_above(levels: Optional[Sequence[float]], entry_price: float) -> Optional[float]:
    above = [float(level) for level in (levels or []) if level is not None and float(level) > entry_price]
    return min(above) if above else None


def default_stop_loss(entry_price: float, support_levels: Optional[Sequence[float]] = None) -> float:
    support = nearest_support_below(support_levels, entry_price)
    if support is not None:
        return support
    return entry_price * DEFAULT_STOP_LOSS_FACTOR


def recompute(position, changed: Iterable[str] = ()):
    """
    Refresh every derived field of `position` in place and return it.

    pnl/profit_loss follow entry_price and current_price and keep their last
    value when either price is missing. stop_loss and take_profit are derived
    from the level lists only when those lists are in `changed` and the same
    mutation did not set the threshold explicitly; take_profit is cleared when
    no resistance level lies above entry.
    """
    changed = set(changed)

    pnl = calculate_pnl_percent(position.entry_price, position.current_price)
    if pnl is not None:
        position.pnl = pnl
        position.profit_loss = position.current_price - position.entry_price

    if "support_levels" in changed and "stop_loss" not in changed:
        position.stop_loss = default_stop_loss(position.entry_price, position.support_levels)

    if "resistance_levels" in changed and "take_profit" not in changed:
        position.take_profit = nearest_resistance_above(position.resistance_levels, position.entry_price)

    return position
