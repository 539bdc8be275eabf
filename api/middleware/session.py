"""
Middleware de sesiones del lado servidor.

Correlaciona cada cliente con su `Session` mediante una cookie (por defecto
`JSESSIONID`). La sesión se abre en la primera petición del cliente y su id
queda en `request.state.session_id` para los filtros y handlers.
"""
# api/middleware/session.py
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from core.session_store import SessionStore

logger = logging.getLogger("api.middleware.session")


class SessionMiddleware(BaseHTTPMiddleware):
    """Abre (o recupera) la sesión del cliente y envía la cookie cuando es nueva."""
    def __init__(self, app, store: SessionStore, cookie_name: str = "JSESSIONID", https_only: bool = False):
        super().__init__(app)
        self.store = store
        self.cookie_name = cookie_name
        self.https_only = https_only

    async def dispatch(self, request: Request, call_next):
        cookie = request.cookies.get(self.cookie_name)
        session = self.store.open(cookie)
        request.state.session_id = session.id

        response = await call_next(request)

        # Solo se (re)envía la cookie cuando el id cambió
        if session.id != cookie:
            response.set_cookie(
                self.cookie_name,
                session.id,
                httponly=True,
                samesite="lax",
                secure=self.https_only,
            )
        return response
