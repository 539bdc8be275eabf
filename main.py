# main.py
"""
Servidor HTTP/WebSocket con FastAPI:
- Rutas REST con política de orígenes/CORS y rate limit por sesión.
- WebSocket de eco en `/echo` en el MISMO puerto ($PORT).
"""

import logging
import sys

import uvicorn

from config.settings import settings

# ---- Logging
logging.basicConfig(level=settings.LOG_LEVEL.upper(),
                    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("main")

from api.main import create_app

app = create_app(settings)


# --- ASGI wrapper para loguear scopes HTTP/WS antes de que los maneje FastAPI
class ASGILogWrapper:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        stype = scope.get("type")
        if stype in ("http", "websocket"):
            headers = {}
            for k, v in (scope.get("headers") or []):
                headers[k.decode("latin-1").lower()] = v.decode("latin-1")
            logger.debug(
                f"[ASGI] {stype.upper()} scope path={scope.get('path')} client={scope.get('client')} "
                f"origin={headers.get('origin')} upgrade={headers.get('upgrade')}"
            )
        return await self.app(scope, receive, send)


# preparar app ASGI con logger de scopes (no sustituye el objeto FastAPI)
asgi_app = ASGILogWrapper(app)


def log_configuration() -> None:
    """Resumen de configuración (sin datos sensibles)."""
    logger.info("========== Configuration Loaded ==========")
    logger.info(f"Database: host={settings.DB_HOST} port={settings.DB_PORT} "
                f"name={settings.DB_NAME} user={settings.DB_USER} pool={settings.DB_POOL_SIZE}")
    logger.info(f"Application: threads={settings.APP_THREADS} log_level={settings.LOG_LEVEL} "
                f"debug={settings.DEBUG_MODE}")
    logger.info(f"Sessions: enabled={settings.SESSIONS_ENABLED} timeout={settings.SESSION_TIMEOUT} "
                f"rate_limit_interval={settings.RATE_LIMIT_INTERVAL}s")
    logger.info(f"Origins: blocked={settings.BLOCKED_ORIGINS} on_blocked={settings.ON_BLOCKED_ORIGIN}")
    logger.info(f"HTTPS enabled: {settings.USE_HTTPS}")


def main() -> int:
    logger.info("=== Server Startup ===")

    missing = settings.missing_database_settings()
    if missing:
        for name in missing:
            logger.error(f"Missing required environment variable: {name}")
        logger.error("Create a .env file in the project root (or set DATABASE_URL) and retry")
        return 1

    log_configuration()

    ssl_kwargs = {}
    if settings.USE_HTTPS:
        if not (settings.SSL_CERTFILE and settings.SSL_KEYFILE):
            logger.error("USE_HTTPS=true requires SSL_CERTFILE and SSL_KEYFILE")
            return 1
        ssl_kwargs = {"ssl_certfile": settings.SSL_CERTFILE, "ssl_keyfile": settings.SSL_KEYFILE}

    logger.info(f"Server starting on {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        asgi_app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
        ws="websockets",
        **ssl_kwargs,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
