"""
Carga de configuración desde variables de entorno usando Pydantic.

Lee `.env` (también en `../.env` y `../../.env`) para poblar la conexión a la
base de datos, la política de orígenes, el limitador de tasa y las sesiones.
"""
# config/settings.py
from typing import Literal
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict

# Claves obligatorias si no se entrega DATABASE_URL completa
REQUIRED_DB_VARS = ("DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME")


class Settings(BaseSettings):
    """Esquema de variables de entorno usadas por la app."""
    # Servidor
    HOST: str = "0.0.0.0"
    PORT: int = 80
    USE_HTTPS: bool = False
    SSL_CERTFILE: str | None = None
    SSL_KEYFILE: str | None = None
    APP_THREADS: int = 4
    LOG_LEVEL: str = "INFO"
    DEBUG_MODE: bool = False

    # Base de datos (DATABASE_URL tiene prioridad sobre DB_*)
    DB_HOST: str | None = None
    DB_PORT: int = 3306
    DB_USER: str | None = None
    DB_PASSWORD: str | None = None
    DB_NAME: str | None = None
    DB_POOL_SIZE: int = 4
    DATABASE_URL: str | None = None

    # Política de orígenes
    BLOCKED_ORIGINS: list[str] = ["www.some-evil-place.com"]
    ON_BLOCKED_ORIGIN: Literal["reject_forbidden", "reject_not_found"] = "reject_not_found"

    # Sesiones y rate limit
    SESSIONS_ENABLED: bool = True
    SESSION_TIMEOUT: float = 1200
    SESSION_COOKIE: str = "JSESSIONID"
    RATE_LIMIT_INTERVAL: float = 10.0

    # Document root para archivos estáticos
    STATIC_DIR: str | None = None

    model_config = SettingsConfigDict(
        env_file=("../../.env", "../.env", ".env"),
        extra="ignore",
    )

    def missing_database_settings(self) -> list[str]:
        """Devuelve las claves DB_* faltantes (vacío si hay DATABASE_URL)."""
        if self.DATABASE_URL:
            return []
        return [name for name in REQUIRED_DB_VARS if not getattr(self, name)]

    def database_url(self) -> str | None:
        """URL de SQLAlchemy: DATABASE_URL o la compuesta desde DB_* (MySQL)."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.missing_database_settings():
            return None
        password = quote_plus(self.DB_PASSWORD)
        return (
            f"mysql+pymysql://{self.DB_USER}:{password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


settings = Settings()
