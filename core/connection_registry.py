# core/connection_registry.py
"""
Registro en memoria de conexiones WebSocket activas.

Cada conexión se identifica por un handle opaco (handle -> `Connection`). Los
callbacks de apertura, mensaje y cierre solo tocan su propia entrada.
"""
import enum
import threading
import time
import uuid
from typing import Optional


class ConnectionState(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class Connection:
    """Conexión registrada: websocket, estado y metadatos del cliente."""
    def __init__(self, handle: str, websocket: object, remote: Optional[tuple] = None):
        self.handle = handle
        self.websocket = websocket
        self.remote = remote
        self.state = ConnectionState.OPEN
        self.opened_at = time.time()


class ConnectionRegistry:
    """Administra conexiones WebSocket y su estado de ciclo de vida."""
    def __init__(self):
        self._lock = threading.Lock()
        self.connections: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self.connections)

    def open(self, websocket: object) -> str:
        """Registra una conexión nueva en estado OPEN y devuelve su handle."""
        client = getattr(websocket, "client", None)
        remote = (client.host, client.port) if client else None
        handle = uuid.uuid4().hex
        with self._lock:
            self.connections[handle] = Connection(handle, websocket, remote)
        return handle

    def get(self, handle: str) -> Optional[Connection]:
        return self.connections.get(handle)

    def state(self, handle: str) -> ConnectionState:
        """Estado de la conexión; un handle desconocido se considera cerrado."""
        conn = self.connections.get(handle)
        return conn.state if conn else ConnectionState.CLOSED

    def close(self, handle: str) -> Optional[Connection]:
        """Marca la conexión como CLOSED y la elimina del registro."""
        with self._lock:
            conn = self.connections.pop(handle, None)
        if conn:
            conn.state = ConnectionState.CLOSED
        return conn

    def all(self) -> list[str]:
        """Devuelve la lista de handles actualmente abiertos."""
        return list(self.connections.keys())
