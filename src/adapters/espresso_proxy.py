"""Proxy to the Espresso instrumentation server.

Implements `core.interfaces.proxy.CommandProxy` over httpx:
- Prefixes command paths with `/session/<id>` when a session is active.
- Unwraps the `{"value": ...}` envelope of successful responses.
- Turns HTTP errors, W3C error objects and transport failures into a single
  `RemoteInvocationError`.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import ProxyResponse
from core.errors import ConfigurationError, MalformedResponseError, RemoteInvocationError

logger = logging.getLogger(__name__)

_SESSIONLESS_PATHS = frozenset({"/status"})


class EspressoProxy:
    """HTTP command proxy bound to one server (and optionally one session)."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        session_id: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.session_id = session_id if session_id is not None else self._settings.session_id
        self._owns_client = client is None
        try:
            self._client = client or build_async_client(self._settings)
        except httpx.InvalidURL as exc:
            raise ConfigurationError(
                f"Invalid server URL {self._settings.server_url!r}: {exc}"
            ) from exc

    async def __aenter__(self) -> "EspressoProxy":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def url_for(self, path: str) -> str:
        """Relative URL for `path`, session-scoped when a session is active."""

        if not path.startswith("/"):
            path = "/" + path
        if (
            self.session_id
            and not path.startswith("/session/")
            and path not in _SESSIONLESS_PATHS
        ):
            return f"/session/{self.session_id}{path}"
        return path

    async def command(
        self,
        path: str,
        method: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        url = self.url_for(path)
        method = method.upper()
        logger.debug("Proxying %s %s", method, url)

        try:
            response = await self._client.request(
                method,
                url,
                json=body if method != "GET" else None,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Transport failure for %s %s: %s", method, url, exc)
            raise RemoteInvocationError(
                f"Could not proxy command to {method} {url}: {exc}"
            ) from exc

        return self._decode(method, url, response)

    async def status(self) -> Any:
        """Server status document (`GET /status`), useful for diagnostics."""

        return await self.command("/status", "GET")

    def _decode(self, method: str, url: str, response: httpx.Response) -> Any:
        raw: Any = None
        if response.content:
            try:
                raw = response.json()
            except ValueError:
                if response.is_success:
                    raise MalformedResponseError(
                        f"Non-JSON response to {method} {url}",
                        payload=response.text,
                    ) from None
                raw = None

        envelope: ProxyResponse | None = None
        if isinstance(raw, dict) and "value" in raw:
            try:
                envelope = ProxyResponse.model_validate(raw)
            except ValidationError:
                envelope = None

        # Error objects that are not W3C shaped still fail the command.
        has_error_object = envelope is not None and envelope.has_error_object()
        server_error = envelope.server_error() if envelope else None
        legacy_failure = envelope is not None and envelope.status not in (None, 0)

        if response.is_success and not has_error_object and not legacy_failure:
            return envelope.value if envelope is not None else raw

        if server_error is not None:
            message = server_error.message or server_error.error
        elif envelope is not None and isinstance(envelope.value, str):
            message = envelope.value
        elif isinstance(raw, dict) and isinstance(raw.get("value"), dict):
            value = raw["value"]
            message = str(value.get("message") or value.get("error") or value)
        else:
            message = response.text or response.reason_phrase

        logger.warning(
            "%s %s failed with HTTP %s: %s", method, url, response.status_code, message
        )
        raise RemoteInvocationError(
            message,
            error=server_error.error if server_error else None,
            status_code=response.status_code,
            stacktrace=server_error.stacktrace if server_error else None,
        )
