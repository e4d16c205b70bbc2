"""Proxy capability contract.

Why Protocol:
- A structural contract (duck typing) with no rigid inheritance.
- The HTTP proxy, a recording test double or another driver's proxy are
  interchangeable without coupling the core to a concrete transport.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CommandProxy(Protocol):
    """Minimal contract for forwarding a command to the remote server.

    Design rules:
    - `command` is asynchronous because it performs network I/O.
    - It returns the decoded JSON result, or raises on any failure.
    - Session handling, timeouts and transport errors are its business.
    """

    async def command(
        self,
        path: str,
        method: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Send `method path` with an optional JSON `body` and return the decoded value."""

        ...
