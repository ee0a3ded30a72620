"""API routers package."""

from fxfolio.api.routers.fx import router as fx_router
from fxfolio.api.routers.positions import router as positions_router
from fxfolio.api.routers.portfolio import router as portfolio_router

__all__ = [
    "fx_router",
    "positions_router",
    "portfolio_router",
]
