# api/main.py
"""
Construcción de la app FastAPI (REST + WebSocket de eco).

Orden de la cadena HTTP: política de orígenes → sesiones → router →
(rate limit si la ruta lo declara) → handler. El WebSocket `/echo` no pasa
por los middlewares HTTP.
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Callable, Optional

import anyio.to_thread
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from api.middleware.origin_policy import OriginPolicy, OriginPolicyMiddleware
from api.middleware.rate_limit import RateLimitFilter
from api.middleware.session import SessionMiddleware
from api.routes import echo, health, pages, user
from config.settings import Settings, settings as default_settings
from core.connection_registry import ConnectionRegistry
from core.echo_handler import EchoHandler
from core.errors import RateLimited, rate_limited_handler
from core.session_store import SessionStore
from database.db import build_engine

logger = logging.getLogger("api.main")


async def purge_sessions_periodically(store: SessionStore) -> None:
    """Elimina las sesiones expiradas cada `timeout` segundos (mínimo 1 s)."""
    while True:
        await anyio.sleep(max(store.timeout, 1.0))
        store.purge_expired()


def create_app(
    settings: Optional[Settings] = None,
    session_store: Optional[SessionStore] = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    """Crea la app con sus colaboradores inyectados (store, registro, engine)."""
    settings = settings or default_settings
    store = session_store if session_store is not None else SessionStore(timeout=settings.SESSION_TIMEOUT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Tamaño del pool de hilos para handlers síncronos
        anyio.to_thread.current_default_thread_limiter().total_tokens = settings.APP_THREADS
        async with anyio.create_task_group() as tg:
            if store.timeout > 0:
                tg.start_soon(purge_sessions_periodically, store)
            yield
            tg.cancel_scope.cancel()
        if app.state.db_engine is not None:
            app.state.db_engine.dispose()

    app = FastAPI(title="Service Skeleton API", version="1.0", debug=settings.DEBUG_MODE, lifespan=lifespan)

    app.state.settings = settings
    app.state.session_store = store
    app.state.rate_limit_filter = RateLimitFilter(store, settings.RATE_LIMIT_INTERVAL, clock)
    app.state.connection_registry = ConnectionRegistry()
    app.state.echo_handler = EchoHandler(app.state.connection_registry)
    app.state.db_engine = build_engine(settings)

    app.add_exception_handler(RateLimited, rate_limited_handler)

    # El último middleware agregado es el más externo:
    # 1) Sesiones (interno)
    if settings.SESSIONS_ENABLED:
        app.add_middleware(
            SessionMiddleware,
            store=store,
            cookie_name=settings.SESSION_COOKIE,
            https_only=settings.USE_HTTPS,
        )
    # 2) Política de orígenes / CORS — siempre antes de todo
    app.add_middleware(
        OriginPolicyMiddleware,
        policy=OriginPolicy(settings.BLOCKED_ORIGINS, settings.ON_BLOCKED_ORIGIN),
    )

    # 3) Routers
    app.include_router(pages.router, tags=["Pages"])
    app.include_router(user.router, prefix="/demo/v1/user", tags=["User"])
    app.include_router(health.router, tags=["Health"])
    app.include_router(echo.router, tags=["Echo"])

    # 4) Document root (al final para no tapar las rutas)
    if settings.STATIC_DIR:
        if os.path.isdir(settings.STATIC_DIR):
            app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
        else:
            logger.warning(f"STATIC_DIR not found: {settings.STATIC_DIR}")

    return app
