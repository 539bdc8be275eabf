"""
Filtro de limitación de tasa (rate limit) por sesión.

Cada sesión puede pasar por una ruta filtrada como máximo una vez por
intervalo (10 s por defecto). El instante del último paso admitido se guarda
en la sesión bajo `visitDate`; las peticiones rechazadas no lo actualizan.

Las rutas lo activan con `dependencies=[Depends(rate_limited)]`.
"""
# api/middleware/rate_limit.py
import logging
import time
from typing import Callable, Optional

from starlette.requests import Request

from core.errors import RateLimited, SessionUnavailable
from core.session_store import SessionStore

logger = logging.getLogger("api.middleware.rate_limit")

VISIT_DATE_KEY = "visitDate"


class RateLimitFilter:
    """Admite un paso por sesión cada `interval` segundos."""
    def __init__(self, store: SessionStore, interval: float = 10.0, clock: Callable[[], float] = time.time):
        self.store = store
        self.interval = interval
        self.clock = clock

    def admit(self, session_id: Optional[str]) -> None:
        """Registra el paso de la sesión o lanza `RateLimited`."""
        # Sin sesión no hay contra qué limitar: se deja pasar
        if session_id is None:
            return

        now = self.clock()
        denied: list[float] = []

        def advance(last: Optional[float]) -> float:
            if last is None:
                return now
            elapsed = now - last
            if elapsed >= self.interval:
                return now
            denied.append(elapsed)
            return last

        try:
            self.store.atomically_modify(session_id, VISIT_DATE_KEY, advance)
        except SessionUnavailable:
            logger.debug(f"[Rate Limit] session {session_id} unavailable, allowing")
            return

        if denied:
            raise RateLimited(denied[0], self.interval)

    async def __call__(self, request: Request) -> None:
        self.admit(getattr(request.state, "session_id", None))


async def rate_limited(request: Request) -> None:
    """Dependencia de FastAPI: aplica el `RateLimitFilter` configurado en la app."""
    await request.app.state.rate_limit_filter(request)
