# tracker/mcp_server.py

from fastmcp import FastMCP

from tracker.core.db import session_scope
from tracker.repositories import RepositoryFactory
from tracker.schemas.positions import PositionOut
from tracker.services.portfolio_service import build_portfolio_summary
from tracker.services.watchlist_service import WatchlistService

mcp = FastMCP("Position Tracker MCP")


def open_positions_report(factory: RepositoryFactory) -> dict:
    rows = factory.get_position_repository().get_open_positions()
    positions = [PositionOut.model_validate(r).model_dump(mode="json") for r in rows]
    return {
        "structuredContent": {"positions": positions},
        "content": [{"type": "text", "text": f"Open positions: {len(positions)}"}],
    }


def portfolio_summary_report(factory: RepositoryFactory) -> dict:
    summary = build_portfolio_summary(factory.get_position_repository().get_positions())
    return {
        "structuredContent": summary,
        "content": [{
            "type": "text",
            "text": (
                f"{summary['open_positions']} open / {summary['closed_positions']} closed, "
                f"win rate {summary['win_rate']:.1f}%"
            ),
        }],
    }


def pending_watchlist_report(factory: RepositoryFactory, stage: str) -> dict:
    tickers = WatchlistService(factory).pending_for(stage)
    return {
        "structuredContent": {"stage": stage, "tickers": tickers},
        "content": [{"type": "text", "text": f"Pending {stage} analysis: {', '.join(tickers) or 'none'}"}],
    }


@mcp.tool()
def open_positions():
    """Return every open position with its current price and pnl"""
    with session_scope() as db:
        return open_positions_report(RepositoryFactory(db))


@mcp.tool()
def portfolio_summary():
    """Return aggregate statistics over all positions"""
    with session_scope() as db:
        return portfolio_summary_report(RepositoryFactory(db))


@mcp.tool()
def pending_watchlist(stage: str = "technical"):
    """Return watchlist tickers waiting for the given analysis stage (technical or news)"""
    with session_scope() as db:
        return pending_watchlist_report(RepositoryFactory(db), stage)
