from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ribaunt.config import settings
from ribaunt.logging_config import setup_logging
from ribaunt.middleware.logging import LoggingMiddleware
from ribaunt.middleware.rate_limit import limiter
from ribaunt.routers import challenges
from ribaunt.services.challenge_service import get_engine

setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Refuse to start without a signing secret."""
    get_engine()
    logger.info(
        "application_started",
        difficulty=settings.default_difficulty,
        ttl_seconds=settings.challenge_ttl_seconds,
    )
    yield


app = FastAPI(
    title="Ribaunt",
    description="Proof-of-work CAPTCHA challenges",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Added last so it wraps everything, CORS responses included
app.add_middleware(LoggingMiddleware)

app.include_router(challenges.router, prefix="/api/v1", tags=["challenges"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
