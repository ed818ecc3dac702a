from fastapi import APIRouter

from .routes.portfolio import router as portfolio_router
from .routes.positions import router as positions_router
from .routes.predictions import router as predictions_router
from .routes.prices import router as prices_router
from .routes.watchlist import router as watchlist_router

api_router = APIRouter()
api_router.include_router(positions_router, prefix="/positions", tags=["Positions"])
api_router.include_router(portfolio_router, tags=["Portfolio"])
api_router.include_router(watchlist_router, prefix="/watchlist", tags=["Watchlist"])
api_router.include_router(prices_router, prefix="/prices", tags=["Prices"])
api_router.include_router(predictions_router, prefix="/predictions", tags=["Predictions"])
