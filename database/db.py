"""
Configuración base de SQLAlchemy para la aplicación.

Construye el `engine` a partir de la configuración (DATABASE_URL o DB_*). Si
no hay base de datos configurada, no se crea ningún cliente y el health check
responde 503.
"""
# database/db.py
import logging
from typing import Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine

from config.settings import Settings

logger = logging.getLogger("database.db")


def build_engine(settings: Settings) -> Optional[Engine]:
    """Crea el engine (sin conectar todavía) o devuelve None si falta configuración."""
    url = settings.database_url()
    if not url:
        logger.warning("No database configured (DATABASE_URL / DB_*)")
        return None

    kwargs = {"pool_pre_ping": True}
    if not url.startswith("sqlite"):
        kwargs["pool_size"] = settings.DB_POOL_SIZE
    try:
        return create_engine(url, **kwargs)
    except Exception as e:
        logger.error(f"Error creando engine de base de datos: {e}")
        return None


def list_tables(engine: Engine) -> list[str]:
    """Equivalente portable a `SHOW TABLES`: nombres de tablas del esquema actual."""
    with engine.connect() as conn:
        return inspect(conn).get_table_names()
