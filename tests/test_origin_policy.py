"""
Tests del middleware de política de orígenes y CORS.
"""
import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from api.middleware.origin_policy import OriginPolicy
from core.errors import PolicyRejection
from tests.conftest import make_settings

EVIL = "http://www.some-evil-place.com"
GOOD = "http://localhost:3000"


def add_spy_route(app):
    calls = []

    @app.get("/spy")
    def spy():
        calls.append(1)
        return {"result": "ok"}

    return calls


class TestOriginPolicy:
    def test_check_allows_absent_origin(self):
        OriginPolicy(["evil"]).check("")

    def test_check_matches_substring(self):
        with pytest.raises(PolicyRejection) as exc_info:
            OriginPolicy(["some-evil-place"], "reject_forbidden").check(EVIL)
        assert exc_info.value.status_code == 403

    def test_empty_entries_are_ignored(self):
        OriginPolicy(["", "evil.com"]).check(GOOD)


class TestBlockedOrigin:
    def test_blocked_origin_not_found_and_handler_not_invoked(self, app):
        calls = add_spy_route(app)
        with TestClient(app) as client:
            response = client.get("/spy", headers={"Origin": EVIL})

        assert response.status_code == 404
        assert calls == []
        assert "access-control-allow-origin" not in response.headers

    def test_blocked_origin_forbidden_variant(self, clock):
        app = create_app(settings=make_settings(ON_BLOCKED_ORIGIN="reject_forbidden"), clock=clock)
        calls = add_spy_route(app)
        with TestClient(app) as client:
            response = client.get("/spy", headers={"Origin": EVIL})

        assert response.status_code == 403
        assert calls == []

    def test_blocked_origin_wins_over_preflight(self, client):
        response = client.options("/slow", headers={"Origin": EVIL})
        assert response.status_code == 404

    def test_blocked_origin_does_not_reach_rate_limit(self, client):
        client.get("/")
        assert client.get("/slow", headers={"Origin": EVIL}).status_code == 404
        assert client.get("/slow").status_code == 200


class TestPreflight:
    def test_options_with_origin_returns_cors_headers(self, client):
        response = client.options("/demo/v1/user/42/info", headers={"Origin": GOOD})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == GOOD
        assert response.headers["access-control-allow-credentials"] == "true"
        assert response.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"

    def test_options_without_origin_has_no_cors_headers(self, client):
        response = client.options("/slow")

        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers

    def test_options_does_not_invoke_handler(self, app):
        calls = add_spy_route(app)
        with TestClient(app) as client:
            assert client.options("/spy", headers={"Origin": GOOD}).status_code == 200
        assert calls == []

    def test_options_does_not_consume_rate_limit(self, client):
        client.get("/")
        client.options("/slow", headers={"Origin": GOOD})
        assert client.get("/slow").status_code == 200


class TestResponseDecoration:
    def test_forwarded_response_gets_origin_headers(self, client):
        response = client.get("/", headers={"Origin": GOOD})

        assert response.status_code == 200
        assert response.text == "Hello unexCoder!"
        assert response.headers["access-control-allow-origin"] == GOOD
        assert response.headers["access-control-allow-credentials"] == "true"
        assert "access-control-allow-methods" not in response.headers

    def test_no_origin_no_cors_headers(self, client):
        response = client.get("/test")

        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers

    def test_rate_limited_response_is_decorated(self, client):
        client.get("/slow")
        response = client.get("/slow", headers={"Origin": GOOD})

        assert response.status_code == 429
        assert response.headers["access-control-allow-origin"] == GOOD

    def test_unknown_route_is_decorated(self, client):
        response = client.get("/missing", headers={"Origin": GOOD})

        assert response.status_code == 404
        assert response.headers["access-control-allow-origin"] == GOOD
