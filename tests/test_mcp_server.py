from tracker.mcp_server import open_positions_report, pending_watchlist_report, portfolio_summary_report
from tracker.schemas.positions import PositionCreate
from tracker.schemas.watchlist import WatchlistCreate
from tracker.services.positions_service import PositionService
from tracker.services.watchlist_service import WatchlistService


def test_open_positions_report(factory, quotes):
    PositionService(factory, quote_fn=quotes).open_position(
        PositionCreate(ticker="ABC", entry_price=100, timeframe="short")
    )
    report = open_positions_report(factory)

    [position] = report["structuredContent"]["positions"]
    assert position["ticker"] == "ABC"
    assert report["content"][0]["text"] == "Open positions: 1"


def test_portfolio_summary_report_on_empty_book(factory):
    report = portfolio_summary_report(factory)
    assert report["structuredContent"]["total_positions"] == 0
    assert "win rate 0.0%" in report["content"][0]["text"]


def test_pending_watchlist_report(factory, quotes):
    WatchlistService(factory, quote_fn=quotes).add_item(WatchlistCreate(ticker="XYZ", fundamental_score=7))
    report = pending_watchlist_report(factory, "technical")
    assert report["structuredContent"]["tickers"] == ["XYZ"]
