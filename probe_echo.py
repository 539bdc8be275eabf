"""
Prueba manual del WebSocket de eco contra un servidor en ejecución.

Uso: python probe_echo.py [ws://localhost:80/echo]
"""
import asyncio
import logging
import sys

import websockets

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

MESSAGES = ["a", "b", "c", "", b"\x00\xffbinary"]


async def probe(url: str) -> bool:
    """Envía una secuencia de mensajes y verifica que vuelvan idénticos y en orden."""
    logger.info(f"🔍 Probando eco en: {url}")
    try:
        async with websockets.connect(url, open_timeout=10) as websocket:
            for message in MESSAGES:
                await websocket.send(message)
            received = [await websocket.recv() for _ in MESSAGES]
    except Exception as e:
        logger.error(f"❌ Conexión falló: {e}")
        return False

    if received != MESSAGES:
        logger.error(f"❌ Eco distinto: enviado={MESSAGES!r} recibido={received!r}")
        return False
    logger.info("✅ Eco correcto y en orden")
    return True


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else "ws://localhost:80/echo"
    sys.exit(0 if asyncio.run(probe(target)) else 1)
