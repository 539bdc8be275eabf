"""
Rutas demo de usuario (login y consulta de info).

Prefijo aplicado en `api/main.py`: `/demo/v1/user`.
"""
# api/routes/user.py
import logging
import uuid

from fastapi import APIRouter, Query

from api.schemas.user import InfoOut, TokenOut

logger = logging.getLogger("api.routes.user")

# No prefix here; it will be applied in api/main.py
router = APIRouter()


@router.post("/token", response_model=TokenOut)
def login(user_id: str = Query(..., alias="userId"), passwd: str = Query(...)):
    """
    Loguea al usuario y devuelve un token aleatorio junto con su id.
    """
    logger.debug(f"User {user_id} login")
    return TokenOut(id=user_id, token=uuid.uuid4().hex)


@router.get("/{user_id}/info", response_model=InfoOut)
def get_info(user_id: str, token: str = Query(...)):
    return InfoOut(id=user_id, token=token)
