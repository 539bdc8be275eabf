"""
Ruta de salud de la base de datos.

`GET /health/db` lista las tablas para verificar la conexión.
"""
# api/routes/health.py
import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from database.db import list_tables

logger = logging.getLogger("api.routes.health")

router = APIRouter()


@router.get("/health/db")
def check_db(request: Request):
    """Responde 200 con las tablas o 503 si no hay cliente o la consulta falla."""
    engine = request.app.state.db_engine
    if engine is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "message": "No database client available"},
        )

    try:
        tables = list_tables(engine)
    except SQLAlchemyError as e:
        logger.error(f"DB health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "message": f"Database query failed: {e}"},
        )

    return {
        "status": "ok",
        "message": "Database connection is healthy",
        "table_count": len(tables),
        "tables": tables,
    }
