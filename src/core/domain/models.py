"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the boundary and self-documenting fields, without
  coupling the core to the HTTP layer.
- Aliases keep Python names while matching the server's camelCase wire keys.

Note:
- These models describe *what* travels on the wire, not *how* it is sent.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, StrictStr, TypeAdapter, ValidationError
from pydantic.config import ConfigDict


class ServerError(BaseModel):
    """W3C style error object found in the `value` of a failed response."""

    model_config = ConfigDict(extra="ignore")

    error: str = Field(
        ...,
        description="Error code, e.g. 'unknown error' or 'invalid argument'.",
    )
    message: str | None = Field(
        default=None,
        description="Human readable message from the server.",
    )
    stacktrace: str | None = Field(
        default=None,
        description="Server-side stacktrace, when provided.",
    )


class ProxyResponse(BaseModel):
    """Response envelope returned by the instrumentation server."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    session_id: str | None = Field(
        default=None,
        alias="sessionId",
        description="Session the response belongs to (JSONWP servers only).",
    )
    status: int | None = Field(
        default=None,
        description="Legacy JSONWP status code; 0 means success.",
    )
    value: Any = Field(
        default=None,
        description="Command result or error object.",
    )

    def has_error_object(self) -> bool:
        return isinstance(self.value, dict) and "error" in self.value

    def server_error(self) -> ServerError | None:
        """Parsed error object, or None when absent or not W3C shaped."""

        if not self.has_error_object():
            return None
        try:
            return ServerError.model_validate(self.value)
        except ValidationError:
            return None


# Strict on purpose: numbers or nested objects are not class names.
IdlingResourceList: TypeAdapter[list[str]] = TypeAdapter(list[StrictStr])
