"""
Middleware de política de orígenes y CORS.

Se ejecuta antes del ruteo para toda petición HTTP:
1) Rechaza orígenes bloqueados (404 o 403 según `ON_BLOCKED_ORIGIN`).
2) Responde los preflight `OPTIONS` sin llegar al handler.
3) Para el resto, delega en `call_next` y agrega los headers CORS a la respuesta.
"""
# api/middleware/origin_policy.py
import logging
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from core.errors import BLOCKED_ORIGIN_STATUS, PolicyRejection

logger = logging.getLogger("api.middleware.origin_policy")

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


class OriginPolicy:
    """Lista de orígenes bloqueados (por substring) y código de rechazo."""
    def __init__(self, blocked: Iterable[str], on_blocked_origin: str = "reject_not_found"):
        self.blocked = [b for b in blocked if b]
        self.status_code = BLOCKED_ORIGIN_STATUS[on_blocked_origin]

    def check(self, origin: str) -> None:
        """Lanza `PolicyRejection` si el origen contiene un host bloqueado."""
        if origin and any(b in origin for b in self.blocked):
            raise PolicyRejection(origin, self.status_code)


def add_cors_headers(response: Response, origin: str, preflight: bool = False) -> None:
    response.headers["Access-Control-Allow-Origin"] = origin
    response.headers["Access-Control-Allow-Credentials"] = "true"
    if preflight:
        response.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
        response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS


class OriginPolicyMiddleware(BaseHTTPMiddleware):
    """Rechaza orígenes bloqueados, responde preflight y decora respuestas con CORS."""
    def __init__(self, app, policy: OriginPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")

        # 1) Origen bloqueado → no llega al handler
        try:
            self.policy.check(origin)
        except PolicyRejection as exc:
            logger.warning(
                f"[Origin Reject] origin={exc.origin} path={request.url.path} status={exc.status_code}"
            )
            return PlainTextResponse(exc.detail, status_code=exc.status_code)

        # 2) Preflight CORS
        if request.method.upper() == "OPTIONS":
            response = Response(status_code=200)
            if origin:
                add_cors_headers(response, origin, preflight=True)
            return response

        # 3) Sigue el flujo y decora la respuesta final
        response = await call_next(request)
        # Sin respuesta no hay nada que decorar
        if response is not None and origin:
            add_cors_headers(response, origin)
        return response
