from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

import pandas as pd

from tracker.core.exceptions import ValidationError
from tracker.models import Position, PositionStatus

POSITION_COLUMNS = ["ticker", "status", "entry_price", "current_price", "pnl", "profit_loss", "sold_date"]


def positions_frame(positions: Iterable[Position]) -> pd.DataFrame:
    """One row per position with the columns the aggregates need."""
    rows = [{col: getattr(p, col) for col in POSITION_COLUMNS} for p in positions]
    df = pd.DataFrame(rows, columns=POSITION_COLUMNS)
    for col in ("entry_price", "current_price", "pnl", "profit_loss"):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    return df


def summarize_returns(returns: pd.Series) -> Dict[str, float]:
    """
    Win rate, best/worst and average return over closed-trade pnl values.

    A single trade only fills the slot matching its sign (best when >= 0,
    worst when < 0); the other slot stays 0.
    """
    returns = returns.dropna()
    count = len(returns)
    if count == 0:
        return {
            "win_rate": 0.0,
            "best_percentage_return": 0.0,
            "worst_percentage_return": 0.0,
            "average_return": 0.0,
        }

    if count == 1:
        only = float(returns.iloc[0])
        best, worst = (only, 0.0) if only >= 0 else (0.0, only)
    else:
        best, worst = float(returns.max()), float(returns.min())

    return {
        "win_rate": float((returns > 0).sum() / count * 100),
        "best_percentage_return": best,
        "worst_percentage_return": worst,
        "average_return": float(returns.mean()),
    }


def build_portfolio_summary(positions: Iterable[Position]) -> Dict[str, float]:
    df = positions_frame(positions)
    closed = df[df["status"] == PositionStatus.CLOSED]

    summary = {
        "total_positions": int(len(df)),
        "open_positions": int((df["status"] == PositionStatus.OPEN).sum()),
        "closed_positions": int(len(closed)),
        "total_invested": float(df["entry_price"].sum()),
        "current_value": float(df["current_price"].fillna(df["entry_price"]).sum()),
        "total_pnl": float(df["pnl"].fillna(0).sum()),
    }
    summary.update(summarize_returns(closed["pnl"]))
    return summary


def build_performance(closed_positions: Iterable[Position]) -> Dict[str, float]:
    df = positions_frame(closed_positions)
    stats = {
        "total_trades": int(len(df)),
        "total_profit": float(df["profit_loss"].fillna(0).sum()),
    }
    stats.update(summarize_returns(df["pnl"]))
    return stats


def _ffill_onto(series: pd.Series, calendar: pd.DatetimeIndex) -> pd.Series:
    """Reindex a date-indexed series onto `calendar`, carrying earlier samples forward."""
    if series.empty:
        return pd.Series(float("nan"), index=calendar)
    full = series.index.union(calendar)
    return series.reindex(full).ffill().reindex(calendar)


def build_performance_timeseries(
        closed_positions: Iterable[Position],
        benchmark: Optional[List[Dict]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
) -> List[Dict]:
    """
    Daily cumulative average return of closed trades between start_date and end_date.

    Each day carries the average pnl of every trade closed on or before it,
    and the benchmark return relative to the first benchmark value of the
    window. Days without data repeat the previous value.
    """
    df = positions_frame(closed_positions)
    df = df[df["sold_date"].notna()].copy()
    df["date"] = pd.to_datetime(df["sold_date"]).dt.normalize()

    end = pd.Timestamp(end_date or date.today()).normalize()
    if start_date is not None:
        start = pd.Timestamp(start_date).normalize()
    elif not df.empty:
        start = df["date"].min()
    else:
        start = end - timedelta(days=30)

    if start > end:
        raise ValidationError("startDate must not be after endDate")

    calendar = pd.date_range(start, end, freq="D")

    daily = (
        df.groupby("date")["pnl"]
        .agg(["sum", "count"])
        .sort_index()
    )
    cum_count = daily["count"].cumsum()
    average = daily["sum"].cumsum() / cum_count

    out = pd.DataFrame(index=calendar)
    out["average_return"] = _ffill_onto(average, calendar)
    out["closed_trades"] = _ffill_onto(cum_count.astype(float), calendar).fillna(0).astype(int)

    df_index = pd.DataFrame(benchmark or [], columns=["date", "close"])
    index_close = (
        df_index.assign(date=pd.to_datetime(df_index["date"]).dt.normalize())
        .set_index("date")["close"]
        .astype(float)
        .sort_index()
    )
    index_close = _ffill_onto(index_close, calendar)
    first_valid = index_close.first_valid_index()
    if first_valid is not None:
        out["benchmark_return"] = (index_close / index_close.loc[first_valid] - 1) * 100
    else:
        out["benchmark_return"] = float("nan")

    out = out.astype(object).where(out.notna(), None)
    return [
        {
            "date": ts.date(),
            "average_return": row["average_return"],
            "closed_trades": int(row["closed_trades"]),
            "benchmark_return": row["benchmark_return"],
        }
        for ts, row in out.iterrows()
    ]
