from typing import Dict, List, Optional
import yfinance as yf

from tracker.core.exceptions import UpstreamUnavailable
from tracker.core.logger import logger


def fetch_quote(ticker: str) -> Dict[str, Optional[float]]:
    """Fetch the latest quote for a ticker via Yahoo Finance."""
    symbol = ticker.strip().upper()
    try:
        t = yf.Ticker(symbol)
        fast_info = t.fast_info
        price = fast_info.get("lastPrice")
        previous_close = fast_info.get("previousClose")

        if price is None:
            info = t.info or {}
            price = info.get("regularMarketPrice") or info.get("currentPrice")
            previous_close = previous_close or info.get("regularMarketPreviousClose")
    except Exception as e:
        logger.error(f"Error fetching quote for {symbol}: {e}")
        raise UpstreamUnavailable(f"Quote provider failed for {symbol}: {e}") from e

    change = None
    change_percent = None
    if price is not None and previous_close:
        change = float(price) - float(previous_close)
        change_percent = change / float(previous_close) * 100

    logger.debug(f"Fetched quote for {symbol}: {price}")
    return {
        "ticker": symbol,
        "price": float(price) if price is not None else None,
        "change": change,
        "change_percent": change_percent,
    }


def fetch_current_price(ticker: str) -> float:
    """Latest price for a ticker; raises UpstreamUnavailable when there is none."""
    quote = fetch_quote(ticker)
    if quote["price"] is None:
        raise UpstreamUnavailable(f"No price available for {quote['ticker']}")
    return quote["price"]


def fetch_index_history(symbol: str, period: str = "1y", interval: str = "1d") -> List[Dict]:
    """Fetch daily closes of a market index as [{"date": "YYYY-MM-DD", "close": float}]."""
    try:
        data = yf.Ticker(symbol).history(period=period, interval=interval)
    except Exception as e:
        logger.error(f"Error fetching index history for {symbol}: {e}")
        raise UpstreamUnavailable(f"Index history unavailable for {symbol}: {e}") from e

    if data is None or data.empty:
        raise UpstreamUnavailable(f"No index data found for {symbol}")

    rows = [
        {"date": ts.date().isoformat(), "close": float(close)}
        for ts, close in data["Close"].dropna().items()
    ]
    logger.info(f"Fetched {len(rows)} rows of index data for {symbol}")
    return rows
