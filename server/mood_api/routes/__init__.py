"""API route modules."""
from .mood import router as mood_router
from .analytics import router as analytics_router
from .risk import router as risk_router
from .goals import router as goals_router

__all__ = [
    "mood_router",
    "analytics_router",
    "risk_router",
    "goals_router",
]
