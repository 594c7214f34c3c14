"""Mood Tracker Analytics API - FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .routes import mood, analytics, risk, goals

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Mood Tracker Analytics API",
    description="Read-only API for mood series, risk scoring, goal progress and insights",
    version="1.0.0",
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include routers
app.include_router(mood.router)
app.include_router(analytics.router)
app.include_router(risk.router)
app.include_router(goals.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for the API."""
    return {"status": "healthy", "service": "mood-api"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server.mood_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
