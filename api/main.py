"""FastAPI application: one blackjack engine per client session."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.routes import advisor, game
from api.session import get_registry
from config import config
from engine.errors import EngineError

logging.basicConfig(level=config.logging.level, format=config.logging.format)
logger = logging.getLogger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[config.rate_limit.limit],
)


async def _sweep_sessions(interval: int) -> None:
    while True:
        await asyncio.sleep(interval)
        await get_registry().cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    sweeper = asyncio.create_task(_sweep_sessions(config.session_sweep_interval))
    logger.info("Sweeping idle sessions every %ds", config.session_sweep_interval)
    try:
        yield
    finally:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper


app = FastAPI(
    title="Blackjack Engine",
    description="Blackjack rules, strategy advice and shoe probabilities",
    version="0.1.0",
    debug=config.debug,
    lifespan=lifespan,
)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limited(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(status_code=429, content={"detail": f"Rate limit exceeded: {exc.detail}"})


@app.exception_handler(EngineError)
async def engine_error(request: Request, exc: EngineError) -> JSONResponse:
    """Engine failures that escape a route are the client's bad input."""
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)

app.include_router(game.router, prefix="/api/game", tags=["game"])
app.include_router(advisor.router, prefix="/api/advisor", tags=["advisor"])


@app.get("/api/health")
@limiter.limit(config.rate_limit.limit)
async def health_check(request: Request) -> dict[str, str]:
    return {"status": "healthy"}


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("api.main:app", host=config.host, port=config.port, reload=config.debug)
