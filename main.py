"""
Gully Scorebook - ball-by-ball cricket scoring API
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scorebook import __version__
from scorebook.config import settings
from scorebook.database import init_db
from scorebook.api.deps import get_scorebook
from scorebook.api.match import router as match_router
from scorebook.api.stats import router as stats_router
from scorebook.api.players import router as players_router, roster_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title="Gully Scorebook",
    description="Ball-by-ball scoring for informal cricket",
    version=__version__,
)

# CORS origins - configurable via environment variable
default_origins = [
    "http://localhost:5173",
    "http://localhost:8081",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8081",
]

# Add custom origins from environment (comma-separated)
if settings.CORS_ORIGINS:
    default_origins.extend([o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(match_router, prefix="/api")
app.include_router(stats_router, prefix="/api")
app.include_router(players_router, prefix="/api")
app.include_router(roster_router, prefix="/api")


@app.on_event("startup")
def startup_event():
    """Initialize database and load stored matches"""
    init_db()
    book = get_scorebook()
    logging.getLogger(__name__).info("Scorebook loaded with %d matches", len(book.matches))


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "name": "Gully Scorebook API",
        "version": __version__,
        "status": "running",
    }


@app.get("/api/health")
def health_check():
    """API health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
