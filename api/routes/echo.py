"""
Endpoint WebSocket `/echo`.

No pasa por los middlewares HTTP: acepta la conexión y delega cada evento del
transporte (apertura, mensaje, cierre) en el `EchoHandler` de la app.
"""
# api/routes/echo.py
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger("api.routes.echo")

router = APIRouter()


@router.websocket("/echo")
async def echo_ws(websocket: WebSocket):
    handler = websocket.app.state.echo_handler

    await websocket.accept()
    handle = handler.handle_new_connection(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            await handler.handle_new_message(handle, message)
    except WebSocketDisconnect:
        logger.info(f"[WS Close] handle={handle} disconnected by client")
    except Exception as exc:
        logger.exception(f"[WS Error] handle={handle} error={type(exc).__name__}: {exc}")
    finally:
        handler.handle_connection_closed(handle)
