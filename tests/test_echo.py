"""
Tests del WebSocket de eco y del registro de conexiones.
"""
import pytest
from fastapi.testclient import TestClient

from core.connection_registry import ConnectionRegistry, ConnectionState
from core.echo_handler import EchoHandler

EVIL = "http://www.some-evil-place.com"


class FakeWebSocket:
    def __init__(self):
        self.client = None
        self.sent = []

    async def send_text(self, data):
        self.sent.append(("text", data))

    async def send_bytes(self, data):
        self.sent.append(("bytes", data))


class TestEchoEndpoint:
    def test_messages_are_echoed_in_order(self, client):
        with client.websocket_connect("/echo") as ws:
            for message in ["a", "b", "c"]:
                ws.send_text(message)
            assert [ws.receive_text() for _ in range(3)] == ["a", "b", "c"]

    def test_binary_and_empty_payloads(self, client):
        payload = bytes(range(256))
        with client.websocket_connect("/echo") as ws:
            ws.send_bytes(payload)
            assert ws.receive_bytes() == payload
            ws.send_text("")
            assert ws.receive_text() == ""
            ws.send_bytes(b"")
            assert ws.receive_bytes() == b""

    def test_text_is_not_transformed(self, client):
        text = '{"json": "no se interpreta", "emoji": "🔌"}'
        with client.websocket_connect("/echo") as ws:
            ws.send_text(text)
            assert ws.receive_text() == text

    def test_connections_are_independent(self, client):
        with client.websocket_connect("/echo") as first, client.websocket_connect("/echo") as second:
            first.send_text("uno")
            second.send_text("dos")
            assert second.receive_text() == "dos"
            assert first.receive_text() == "uno"

    def test_registry_tracks_lifecycle(self, app, client):
        registry = app.state.connection_registry
        with client.websocket_connect("/echo") as ws:
            ws.send_text("ping")
            assert ws.receive_text() == "ping"
            assert len(registry) == 1
        assert len(registry) == 0

    def test_not_subject_to_origin_policy(self, client):
        with client.websocket_connect("/echo", headers={"Origin": EVIL}) as ws:
            ws.send_text("hola")
            assert ws.receive_text() == "hola"


class TestEchoHandler:
    @pytest.mark.anyio
    async def test_no_send_after_close(self):
        registry = ConnectionRegistry()
        handler = EchoHandler(registry)
        websocket = FakeWebSocket()
        handle = handler.handle_new_connection(websocket)

        await handler.handle_new_message(handle, {"type": "websocket.receive", "text": "a"})
        handler.handle_connection_closed(handle)
        await handler.handle_new_message(handle, {"type": "websocket.receive", "text": "b"})

        assert websocket.sent == [("text", "a")]
        assert registry.state(handle) is ConnectionState.CLOSED

    @pytest.mark.anyio
    async def test_bytes_frame_is_sent_as_bytes(self):
        handler = EchoHandler(ConnectionRegistry())
        websocket = FakeWebSocket()
        handle = handler.handle_new_connection(websocket)

        await handler.handle_new_message(handle, {"type": "websocket.receive", "bytes": b"\x00\x01"})
        assert websocket.sent == [("bytes", b"\x00\x01")]


class TestConnectionRegistry:
    def test_open_close(self):
        registry = ConnectionRegistry()
        handle = registry.open(FakeWebSocket())

        assert registry.state(handle) is ConnectionState.OPEN
        assert registry.all() == [handle]

        conn = registry.close(handle)
        assert conn.state is ConnectionState.CLOSED
        assert registry.get(handle) is None
        assert registry.close(handle) is None

    def test_close_only_touches_own_entry(self):
        registry = ConnectionRegistry()
        a = registry.open(FakeWebSocket())
        b = registry.open(FakeWebSocket())

        registry.close(a)
        assert registry.state(b) is ConnectionState.OPEN
        assert registry.all() == [b]
