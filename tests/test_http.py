"""
Tests for the authenticated API client.
"""

import asyncio
import json

import httpx
import pytest

from sheshape.http import ApiClient, ApiError, SessionStore, describe_status


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


class Recorder:
    """Collects notifications and redirects."""

    def __init__(self):
        self.notifications: list[str] = []
        self.redirects: list[str] = []


def _client(handler, session=None, recorder=None, path="/onboarding") -> ApiClient:
    recorder = recorder or Recorder()
    return ApiClient(
        "http://api.test",
        session=session if session is not None else SessionStore("tok-123"),
        notify=recorder.notifications.append,
        on_session_expired=recorder.redirects.append,
        current_path=lambda: path,
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


class TestRequests:

    def test_injects_bearer_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"ok": True})

        assert _run(_client(handler).get("/api/users/me")) == {"ok": True}
        assert seen["auth"] == "Bearer tok-123"

    def test_no_token_no_header(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={})

        _run(_client(handler, session=SessionStore()).get("/api/plans"))
        assert seen["auth"] is None

    def test_empty_body_returns_none(self):
        assert _run(_client(lambda r: httpx.Response(204)).delete("/api/plans/1")) is None

    def test_json_body_sent(self):
        seen = {}

        def handler(request):
            seen["body"] = request.read()
            return httpx.Response(200, json={})

        _run(_client(handler).put("/api/plans/1", {"name": "Core"}))
        assert json.loads(seen["body"]) == {"name": "Core"}


class TestErrors:

    def test_unauthorized_clears_session_and_redirects(self):
        session = SessionStore("tok-123")
        recorder = Recorder()
        client = _client(lambda r: httpx.Response(401), session=session, recorder=recorder)

        with pytest.raises(ApiError) as exc_info:
            _run(client.get("/api/users/me"))

        assert exc_info.value.status_code == 401
        assert session.token is None
        assert recorder.redirects == ["/login"]
        assert recorder.notifications == ["Your session has expired. Please log in again."]

    @pytest.mark.parametrize("path", ["/login", "/register"])
    def test_unauthorized_on_auth_page_does_not_redirect(self, path):
        session = SessionStore("tok-123")
        recorder = Recorder()
        client = _client(lambda r: httpx.Response(401), session=session, recorder=recorder, path=path)

        with pytest.raises(ApiError):
            _run(client.post("/api/auth/login", {"email": "a@b.c"}))

        assert session.token is None
        assert recorder.redirects == []
        assert recorder.notifications == []

    @pytest.mark.parametrize(
        "status,message",
        [
            (403, "You do not have permission to perform this action"),
            (404, "The requested resource was not found"),
            (400, "Validation error. Please check your input."),
            (422, "Validation error. Please check your input."),
            (500, "Server error. Please try again later."),
            (503, "Server error. Please try again later."),
        ],
    )
    def test_category_notifications(self, status, message):
        recorder = Recorder()
        client = _client(lambda r: httpx.Response(status), recorder=recorder)

        with pytest.raises(ApiError) as exc_info:
            _run(client.get("/api/products"))

        assert exc_info.value.status_code == status
        assert recorder.notifications == [message]
        assert recorder.redirects == []

    def test_validation_error_uses_server_message(self):
        recorder = Recorder()
        client = _client(
            lambda r: httpx.Response(400, json={"message": "Height out of range"}),
            recorder=recorder,
        )

        with pytest.raises(ApiError) as exc_info:
            _run(client.post("/api/users/profile/setup", {}))

        assert recorder.notifications == ["Height out of range"]
        assert exc_info.value.payload == {"message": "Height out of range"}
        assert exc_info.value.server_message == "Height out of range"

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        recorder = Recorder()
        with pytest.raises(ApiError) as exc_info:
            _run(_client(handler, recorder=recorder).get("/api/plans"))

        assert exc_info.value.status_code is None
        assert recorder.notifications == ["Network error. Please check your connection."]


def test_describe_unknown_status():
    assert describe_status(418) == "Request failed with status 418"


def test_session_store():
    session = SessionStore()
    assert not session.is_authenticated
    session.set_token("abc")
    assert session.is_authenticated
    session.clear()
    assert session.token is None
