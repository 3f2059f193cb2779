"""
SheShape - Authenticated API client.

Thin async wrapper over httpx. Every request carries the session's bearer
token. Failed responses are reported through the notifier with a
category-specific message and raised as ApiError, so callers only ever see
success data or a structured error.

On 401 the session is cleared and, unless the user is already on the login
or register page, the on_session_expired hook is called with "/login".
"""

import logging
from typing import Any, Callable

import httpx

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
AUTH_PATHS = {"/login", "/register"}

Notifier = Callable[[str], None]


class SessionStore:
    """Process-wide holder for the bearer token."""

    def __init__(self, token: str | None = None):
        self.token = token

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def set_token(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None


_session: SessionStore | None = None


def get_session() -> SessionStore:
    """Get the shared session, seeded from settings on first use."""
    global _session

    if _session is None:
        from sheshape.config import settings
        _session = SessionStore(settings.api_token)

    return _session


class ApiError(Exception):
    """
    A failed API call.

    status_code is None for network failures (no response received).
    payload is the decoded JSON error body when the server sent one.
    """

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def server_message(self) -> str | None:
        if isinstance(self.payload, dict) and self.payload.get("message"):
            return str(self.payload["message"])
        return None


def _log_notification(message: str) -> None:
    logger.warning(message)


def describe_status(status_code: int, payload: Any = None) -> str:
    """User-facing message for a failed response."""
    if status_code == 401:
        return "Your session has expired. Please log in again."
    if status_code == 403:
        return "You do not have permission to perform this action"
    if status_code == 404:
        return "The requested resource was not found"
    if status_code in (400, 422):
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return "Validation error. Please check your input."
    if status_code >= 500:
        return "Server error. Please try again later."
    return f"Request failed with status {status_code}"


class ApiClient:
    """
    JSON API client bound to one backend.

    Args:
        base_url: Backend root (default: settings.api_url)
        session: Token holder (default: the shared session)
        notify: Receives user-facing error messages (default: log warning)
        on_session_expired: Redirect hook, called with the login path
        current_path: Returns where the user currently is
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        session: SessionStore | None = None,
        notify: Notifier | None = None,
        on_session_expired: Callable[[str], None] | None = None,
        current_path: Callable[[], str] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if base_url is None or timeout is None:
            from sheshape.config import settings
            base_url = base_url or settings.api_url
            timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.base_url = base_url
        self.session = session if session is not None else get_session()
        self.notify = notify or _log_notification
        self.on_session_expired = on_session_expired
        self.current_path = current_path or (lambda: "/")
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        files: dict | None = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None if empty).

        Raises:
            ApiError: on any non-2xx response or network failure
        """
        kwargs: dict[str, Any] = {"headers": self._headers()}
        if files is not None:
            kwargs["files"] = files
        elif body is not None:
            kwargs["json"] = body

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            message = "Network error. Please check your connection."
            self.notify(message)
            raise ApiError(message) from e

        if response.is_success:
            return response.json() if response.content else None

        payload = _decode_error(response)
        message = describe_status(response.status_code, payload)
        logger.error(f"{method} {path} -> {response.status_code}")

        if response.status_code == 401:
            self._expire_session(message)
        else:
            self.notify(message)

        raise ApiError(message, status_code=response.status_code, payload=payload)

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, body: Any = None, *, files: dict | None = None) -> Any:
        return await self.request("POST", path, body, files=files)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.request("PUT", path, body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def _expire_session(self, message: str) -> None:
        self.session.clear()
        if self.current_path() in AUTH_PATHS:
            return
        self.notify(message)
        if self.on_session_expired:
            self.on_session_expired(LOGIN_PATH)


def _decode_error(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
