"""Error kinds surfaced by the client.

There is a single undifferentiated remote failure: the server does not tell
apart an unparsable class-name list, a missing class, or a class that is not
an idling-resource singleton, and neither do we.
"""

from __future__ import annotations


class EspressoClientError(Exception):
    """Base class for errors raised by this package."""


class RemoteInvocationError(EspressoClientError):
    """A proxied command failed, either in transport or on the server."""

    def __init__(
        self,
        message: str,
        *,
        error: str | None = None,
        status_code: int | None = None,
        stacktrace: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error = error
        self.status_code = status_code
        self.stacktrace = stacktrace


class MalformedResponseError(EspressoClientError):
    """The server answered with a payload that does not match the expected shape."""

    def __init__(self, message: str, *, payload: object = None) -> None:
        super().__init__(message)
        self.payload = payload


class ConfigurationError(EspressoClientError):
    """Settings are invalid, e.g. an unknown log level or an unusable server URL."""
