"""
Handler del endpoint WebSocket de eco.

Implementa el ciclo de vida de cada conexión (apertura -> mensajes -> cierre):
todo mensaje de texto o binario recibido se reenvía idéntico a la misma
conexión, en el mismo orden. No hay buffer ni transformación del contenido.
"""
# core/echo_handler.py
import logging

from core.connection_registry import ConnectionRegistry, ConnectionState

logger = logging.getLogger("core.echo_handler")


class EchoHandler:
    """Despacha los eventos open/message/close del transporte sobre el registro."""
    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    def handle_new_connection(self, websocket) -> str:
        """Registra la conexión (ya aceptada) y devuelve su handle."""
        handle = self.registry.open(websocket)
        conn = self.registry.get(handle)
        logger.info(f"[WS Open] handle={handle} from={conn.remote}")
        return handle

    async def handle_new_message(self, handle: str, message: dict) -> None:
        """Reenvía el frame recibido tal cual; ignora conexiones ya cerradas."""
        conn = self.registry.get(handle)
        if conn is None or conn.state is not ConnectionState.OPEN:
            logger.debug(f"[WS Drop] handle={handle} not open")
            return

        text = message.get("text")
        if text is not None:
            await conn.websocket.send_text(text)
            return
        data = message.get("bytes")
        if data is not None:
            await conn.websocket.send_bytes(data)

    def handle_connection_closed(self, handle: str) -> None:
        """Marca la conexión como cerrada y libera su entrada del registro."""
        conn = self.registry.close(handle)
        if conn:
            logger.info(f"[WS Close] handle={handle} from={conn.remote}")
