"""Shared request data types."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from core.headers import HeaderInput


@dataclass(frozen=True)
class RequestContext:
    """Inbound request state the forwarder may read from.

    ``headers`` maps a header name to a string or a list of strings.
    """

    headers: Mapping[str, str | list[str]] = field(default_factory=dict)
    tenant_id: str | None = None
    params: Mapping[str, str] = field(default_factory=dict)
    body: Any = None


@dataclass
class RequestInit:
    """Base initializer for an outbound request."""

    method: str
    body: Any = None
    headers: "HeaderInput | None" = None


@dataclass
class OutboundRequest:
    """Fully formed request ready for the transport."""

    method: str
    headers: httpx.Headers
    body: str | bytes | None = None

    def send_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``httpx.AsyncClient.request``."""
        kwargs: dict[str, Any] = {"headers": self.headers}
        if self.body is not None:
            kwargs["content"] = self.body
        return kwargs
