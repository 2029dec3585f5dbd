"""HTTP transport for the task API.

Attaches the stored bearer token to every request and turns non-2xx
responses and connection failures into ``ApiError`` values.
"""

import logging
from enum import Enum
from typing import Any

import httpx

from app.client.credentials import TOKEN_KEY, CredentialStore

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong, please try again"
NETWORK_ERROR_MESSAGE = "Could not reach the server"


class ErrorKind(str, Enum):
    """Category of a failed request."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"
    NETWORK = "network"


class ApiError(Exception):
    """A request failed.

    Attributes:
        message: Human readable message suitable for a notification
        kind: Error category
        status_code: HTTP status, None when no response was received
        errors: Field name -> messages, for validation failures
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNEXPECTED,
        status_code: int | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.errors = errors or {}


class NetworkError(ApiError):
    """No response was received (connection refused, timeout, ...)."""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE) -> None:
        super().__init__(message, kind=ErrorKind.NETWORK)


def _kind_for_status(status_code: int) -> ErrorKind:
    if status_code == 422:
        return ErrorKind.VALIDATION
    if status_code == 401:
        return ErrorKind.AUTHENTICATION
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    return ErrorKind.UNEXPECTED


def error_from_response(response: httpx.Response) -> ApiError:
    """Build an ApiError from a non-2xx response."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    message = body.get("message") or body.get("detail")
    if not isinstance(message, str) or not message:
        message = DEFAULT_ERROR_MESSAGE
    errors = body.get("errors") if isinstance(body.get("errors"), dict) else None

    return ApiError(
        message,
        kind=_kind_for_status(response.status_code),
        status_code=response.status_code,
        errors=errors,
    )


class ApiTransport:
    """Async JSON client bound to the API base URL.

    The credential store is only read here; the auth session is its sole writer.
    """

    def __init__(
        self,
        base_url: str,
        store: CredentialStore,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.store = store
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def _headers(self) -> dict[str, str]:
        token = self.store.get(TOKEN_KEY)
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def request(self, method: str, path: str, json: Any = None) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            NetworkError: If no response was received
            ApiError: If the server answered with a non-2xx status
        """
        url = self.base_url + path
        try:
            response = await self._client.request(
                method, url, json=json, headers=self._headers()
            )
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed without response: {e!r}")
            raise NetworkError() from e

        if response.is_error:
            error = error_from_response(response)
            logger.warning(
                f"{method} {path} returned {response.status_code}: {error.message}"
            )
            raise error

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(DEFAULT_ERROR_MESSAGE, status_code=response.status_code) from e
        return body if isinstance(body, dict) else {"data": body}

    async def get(self, path: str) -> dict[str, Any]:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any = None) -> dict[str, Any]:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> dict[str, Any]:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> dict[str, Any]:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
