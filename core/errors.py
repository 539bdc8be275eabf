"""
Errores del pipeline de peticiones.

- `PolicyRejection`: origen bloqueado (403/404 según configuración).
- `RateLimited`: la sesión pidió una ruta filtrada antes de cumplir el intervalo.
- `SessionUnavailable`: no existe (o expiró) la sesión pedida al store.
"""
# core/errors.py
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger("core.errors")

BLOCKED_ORIGIN_STATUS = {
    "reject_forbidden": status.HTTP_403_FORBIDDEN,
    "reject_not_found": status.HTTP_404_NOT_FOUND,
}


class PolicyRejection(Exception):
    """El header `Origin` coincide con un origen bloqueado."""
    def __init__(self, origin: str, status_code: int = status.HTTP_404_NOT_FOUND):
        super().__init__(f"origin rejected: {origin}")
        self.origin = origin
        self.status_code = status_code

    @property
    def detail(self) -> str:
        return "Forbidden" if self.status_code == status.HTTP_403_FORBIDDEN else "Not Found"


class RateLimited(Exception):
    """Petición dentro del intervalo mínimo; lleva el tiempo transcurrido y restante."""
    def __init__(self, elapsed: float, interval: float):
        super().__init__(f"rate limited: elapsed={elapsed:.3f}s interval={interval}s")
        self.elapsed = elapsed
        self.interval = interval

    @property
    def remaining(self) -> float:
        return max(0.0, self.interval - self.elapsed)

    def to_payload(self) -> dict:
        return {
            "result": "error",
            "message": f"Access interval should be at least {self.interval:g} seconds",
            "elapsed_seconds": self.elapsed,
            "remaining_seconds": self.remaining,
        }


class SessionUnavailable(Exception):
    """La sesión no existe en el store (nunca creada o ya expirada)."""
    def __init__(self, session_id: str | None):
        super().__init__(f"session unavailable: {session_id}")
        self.session_id = session_id


async def rate_limited_handler(request: Request, exc: RateLimited) -> JSONResponse:
    """Convierte `RateLimited` en la respuesta 429 con el tiempo restante."""
    logger.info(
        f"[Rate Limit] path={request.url.path} elapsed={exc.elapsed:.3f}s "
        f"remaining={exc.remaining:.3f}s"
    )
    return JSONResponse(status_code=status.HTTP_429_TOO_MANY_REQUESTS, content=exc.to_payload())
