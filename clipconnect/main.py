"""ClipConnect Server - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clipconnect.api.middleware import RateLimitMiddleware
from clipconnect.config import Settings, settings
from clipconnect.database import engine, init_db
from clipconnect.exceptions import ClipConnectError
from clipconnect.services.clipboard_relay import ClipboardRelay
from clipconnect.services.session_registry import SessionRegistry
from clipconnect.store import RecordStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and build the shared store, registry and relay."""
    init_db(engine)

    store = RecordStore(engine)
    app.state.store = store
    app.state.registry = SessionRegistry(store, settings)
    app.state.relay = ClipboardRelay(store, settings)
    logger.info(
        "%s running on port %d (mode=%s, codes=%s)",
        settings.server_name, settings.port, settings.session_mode, settings.code_strategy,
    )

    yield

    engine.dispose()


app = FastAPI(
    title="ClipConnect",
    description="Clipboard relay between devices paired by a short code",
    version="0.1.0",
    lifespan=lifespan,
)


def install_middleware(app: FastAPI, settings: Settings) -> None:
    """Rate limiter first so CORS wraps it: 429s keep their CORS headers."""
    if settings.rate_limit_per_minute > 0:
        app.add_middleware(
            RateLimitMiddleware,
            requests_per_minute=settings.rate_limit_per_minute,
            burst_limit=settings.rate_limit_burst,
            trusted_proxies=settings.trusted_proxies,
        )

    # CORS - mobile apps call from anywhere
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )


install_middleware(app, settings)


# --- Error handlers ---

@app.exception_handler(ClipConnectError)
async def domain_error_handler(request: Request, exc: ClipConnectError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid input"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# --- Register API routers ---
from clipconnect.api.sessions import router as sessions_router  # noqa: E402
from clipconnect.api.clipboard import router as clipboard_router  # noqa: E402
from clipconnect.api.system import router as system_router  # noqa: E402

app.include_router(sessions_router)
app.include_router(clipboard_router)
app.include_router(system_router)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
