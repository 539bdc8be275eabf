"""
Rutas simples de prueba: saludo, listado de parámetros y la ruta lenta
protegida por el rate limit de sesión.
"""
# api/routes/pages.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from api.middleware.rate_limit import rate_limited

router = APIRouter()


@router.api_route("/", methods=["GET", "POST"], response_class=HTMLResponse)
@router.api_route("/test", methods=["GET", "POST"], response_class=HTMLResponse)
def hello():
    return "Hello unexCoder!"


@router.get("/list_para")
def list_parameters(request: Request):
    """Devuelve los parámetros de la query string recibidos."""
    return {"title": "ListParameters", "parameters": dict(request.query_params)}


@router.get("/slow", dependencies=[Depends(rate_limited)])
def slow():
    return {"result": "ok"}
