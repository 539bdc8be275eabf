"""
Esquemas Pydantic para las rutas demo de usuario.
"""
from pydantic import BaseModel


class TokenOut(BaseModel):
    """Respuesta de login: id del usuario y token generado."""
    result: str = "ok"
    id: str
    token: str


class InfoOut(BaseModel):
    """Respuesta de info: devuelve id y token recibidos."""
    result: str = "ok"
    id: str
    token: str
