"""
Store de sesiones en memoria del lado servidor.

Cada cliente tiene una única `Session` (id opaco generado por el servidor) con
un diccionario clave -> valor. El store expone lectura, inserción y
modificación atómica por clave: la modificación se ejecuta con el lock propio
de la sesión, por lo que dos peticiones concurrentes de la misma sesión no se
intercalan y sesiones distintas no compiten entre sí.
"""
# core/session_store.py
import logging
import threading
import time
import uuid
from typing import Any, Callable, Optional

from core.errors import SessionUnavailable

logger = logging.getLogger("core.session_store")


class Session:
    """Estado de un cliente: datos, timestamps y lock de lectura-modificación-escritura."""
    def __init__(self, session_id: str, now: float):
        self.id: str = session_id
        self.created_at: float = now
        self.last_accessed: float = now
        self.data: dict[str, Any] = {}
        self.lock = threading.Lock()

    def __contains__(self, key: str) -> bool:
        return key in self.data


class SessionStore:
    """
    Administra las sesiones activas (session_id -> `Session`).

    `timeout` es el tiempo máximo de inactividad en segundos; 0 desactiva la
    expiración. `clock` debe ser monótono.
    """
    def __init__(self, timeout: float = 0, clock: Callable[[], float] = time.monotonic):
        self.timeout = timeout
        self.clock = clock
        # Solo protege el mapa; los datos de cada sesión usan su propio lock
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}
        self._last_purge = clock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _expired(self, session: Session, now: float) -> bool:
        return self.timeout > 0 and now - session.last_accessed > self.timeout

    def open(self, session_id: Optional[str] = None) -> Session:
        """
        Devuelve la sesión viva para `session_id` o crea una nueva.

        Un id desconocido o expirado nunca se adopta: la nueva sesión recibe
        siempre un id generado aquí.
        """
        session = self.find(session_id) if session_id else None
        if session is not None:
            return session

        now = self.clock()
        # Barrido de expiradas como máximo una vez por `timeout`
        if self.timeout > 0 and now - self._last_purge >= self.timeout:
            self.purge_expired()
        session = Session(uuid.uuid4().hex, now)
        with self._lock:
            self._sessions[session.id] = session
        logger.debug(f"[Session] created id={session.id}")
        return session

    def find(self, session_id: Optional[str]) -> Optional[Session]:
        """Busca una sesión viva; las expiradas se destruyen al consultarlas."""
        if not session_id:
            return None
        now = self.clock()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if self._expired(session, now):
                self._sessions.pop(session_id, None)
                logger.debug(f"[Session] expired id={session_id}")
                return None
            session.last_accessed = now
            return session

    def _require(self, session_id: Optional[str]) -> Session:
        session = self.find(session_id)
        if session is None:
            raise SessionUnavailable(session_id)
        return session

    def get(self, session_id: Optional[str], key: str, default: Any = None) -> Any:
        """Lee el valor de `key` en la sesión."""
        session = self._require(session_id)
        with session.lock:
            return session.data.get(key, default)

    def insert(self, session_id: Optional[str], key: str, value: Any) -> None:
        """Guarda `value` bajo `key` en la sesión."""
        session = self._require(session_id)
        with session.lock:
            session.data[key] = value

    def atomically_modify(
        self,
        session_id: Optional[str],
        key: str,
        fn: Callable[[Optional[Any]], Any],
    ) -> Any:
        """
        Ejecuta `fn(valor_actual_o_None)` con el lock de la sesión y guarda el
        resultado bajo `key`. Devuelve el valor nuevo.
        """
        session = self._require(session_id)
        with session.lock:
            value = fn(session.data.get(key))
            session.data[key] = value
            return value

    def destroy(self, session_id: str) -> None:
        """Elimina la sesión asociada al `session_id`, si existe."""
        with self._lock:
            self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """Elimina todas las sesiones expiradas y devuelve cuántas se borraron."""
        if self.timeout <= 0:
            return 0
        now = self.clock()
        self._last_purge = now
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if self._expired(s, now)]
            for sid in expired:
                self._sessions.pop(sid, None)
        if expired:
            logger.info(f"[Session] purged {len(expired)} expired sessions")
        return len(expired)
