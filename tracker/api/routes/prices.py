from typing import Callable, Dict

from fastapi import APIRouter, Depends, HTTPException

from tracker.api.dependencies import get_quote_fetcher
from tracker.core.exceptions import UpstreamUnavailable
from tracker.core.logger import logger
from tracker.schemas.positions import QuoteOut

router = APIRouter()


def quote_or_error(ticker: str, quote_fn: Callable[[str], Dict]) -> QuoteOut:
    try:
        quote = quote_fn(ticker)
    except UpstreamUnavailable as e:
        logger.error(f"Quote lookup failed for {ticker}: {e}")
        raise HTTPException(502, detail={"error": "Failed to fetch current price", "details": str(e)})

    if quote.get("price") is None:
        raise HTTPException(404, detail=f"Price not found for {ticker.upper()}")
    return QuoteOut.model_validate(quote)


@router.get("/{ticker}", response_model=QuoteOut)
def get_price(ticker: str, quote_fn: Callable[[str], Dict] = Depends(get_quote_fetcher)):
    """Proxy the latest quote for a ticker."""
    return quote_or_error(ticker, quote_fn)
