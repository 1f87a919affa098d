from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from signup_service.deps import get_user_store
from signup_service.logging_config import configure_logging
from signup_service.models import HealthResponse, StatsResponse, format_timestamp
from signup_service.routers.auth import router as auth_router
from signup_service.routers.users import router as users_router
from signup_service.secret_provider import load_secret
from signup_service.settings import Settings, get_settings
from signup_service.user_store import InMemoryUserStore

configure_logging(get_settings().log_level)

logger = logging.getLogger("signup_service")

APP_VERSION = "1.0.0"


@asynccontextmanager
async def _lifespan(app: FastAPI):
    # Served via `uvicorn signup_service.main:app`: fetch the secret before
    # accepting connections. A failure aborts uvicorn's startup.
    if app.state.secret is None:
        app.state.secret = load_secret(app.state.settings).secret
    logger.info("Signup service %s ready (identifier_field=%s)", APP_VERSION, app.state.settings.identifier_field)
    yield


def create_app(
    settings: Settings | None = None,
    *,
    store: InMemoryUserStore | None = None,
    secret: str | None = None,
) -> FastAPI:
    """Build the application.

    Every call gets its own registry unless ``store`` is given. Pass ``secret``
    to skip the startup fetch (the CLI entry point and tests do).
    """
    app = FastAPI(title="Signup Service", version=APP_VERSION, lifespan=_lifespan)
    app.state.settings = settings or get_settings()
    app.state.user_store = store if store is not None else InMemoryUserStore()
    app.state.secret = secret

    app.include_router(auth_router)
    app.include_router(users_router)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return JSONResponse({"status": "ok", "time": format_timestamp(datetime.now(timezone.utc))})

    @app.get("/stats", response_model=StatsResponse)
    async def stats(store: InMemoryUserStore = Depends(get_user_store)):
        s = store.stats()
        return JSONResponse({"totalUsers": s.total_users, "lastSignup": format_timestamp(s.last_signup)})

    return app


app = create_app()
