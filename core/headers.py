"""Header construction for worker requests."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import httpx

from core.request_types import RequestContext


class Header(StrEnum):
    """Framework headers propagated from the app server to the worker."""

    API_KEY = "x-budibase-api-key"
    LICENSE_KEY = "x-budibase-license-key"
    API_VER = "x-budibase-api-version"
    APP_ID = "x-budibase-app-id"
    SESSION_ID = "x-budibase-session-id"
    TYPE = "x-budibase-type"
    PREVIEW_ROLE = "x-budibase-role"
    TENANT_ID = "x-budibase-tenant-id"
    VERIFICATION_CODE = "x-budibase-verification-code"
    RETURN_VERIFICATION_CODE = "x-budibase-return-verification-code"
    RESET_PASSWORD_CODE = "x-budibase-reset-password-code"
    RETURN_RESET_PASSWORD_CODE = "x-budibase-return-reset-password-code"
    TOKEN = "x-budibase-token"
    CSRF_TOKEN = "x-csrf-token"
    CORRELATION_ID = "x-budibase-correlation-id"
    AUTHORIZATION = "authorization"
    MIGRATING_APP = "x-budibase-migrating-app"


ALLOWED_HEADERS: tuple[str, ...] = tuple(h.value for h in Header)


# ---------------------------------------------------------------------------
# Tagged header inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PairListHeaders:
    """Headers given as ``(name, value)`` pairs; repeated names are kept."""

    pairs: Iterable[tuple[str, Any]] = ()

    def to_headers(self) -> httpx.Headers:
        return httpx.Headers(
            [(str(name), str(value)) for name, value in self.pairs if value is not None]
        )


@dataclass(frozen=True)
class MappingHeaders:
    """Headers given as a plain mapping.

    A list value contributes one header line per element.
    """

    mapping: Mapping[str, Any] = field(default_factory=dict)

    def to_headers(self) -> httpx.Headers:
        pairs: list[tuple[str, str]] = []
        for name, value in self.mapping.items():
            pairs.extend((str(name), v) for v in _as_values(value))
        return httpx.Headers(pairs)


@dataclass(frozen=True)
class PrebuiltHeaders:
    """An already-built header container. It is copied, never mutated."""

    headers: httpx.Headers

    def to_headers(self) -> httpx.Headers:
        return self.headers.copy()


HeaderInput = PairListHeaders | MappingHeaders | PrebuiltHeaders


def normalize_headers(headers: HeaderInput | None) -> httpx.Headers:
    """Turn any supported header input into a fresh mutable container."""
    if headers is None:
        return httpx.Headers()
    return headers.to_headers()


def append_header(headers: httpx.Headers, name: str, value: str) -> httpx.Headers:
    """Return ``headers`` with one more ``name`` line, keeping existing ones."""
    return httpx.Headers([*headers.multi_items(), (name, value)])


def _as_values(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class HeaderBuilder:
    """Build outbound worker headers from an inbound request context."""

    def __init__(self, allowed: Iterable[str] = ALLOWED_HEADERS) -> None:
        self._allowed = tuple(h.lower() for h in allowed)

    def build_worker_headers(
        self,
        headers: HeaderInput | None,
        *,
        context: RequestContext | None = None,
        tenant_id: str | None = None,
        api_key: str | None = None,
    ) -> httpx.Headers:
        """Merge base headers with service auth, forwarded headers and tenancy."""
        upstream = normalize_headers(headers)

        if context is None:
            if api_key:
                upstream[Header.API_KEY] = api_key
        elif context.headers:
            upstream = self.copy_allowed(context.headers, upstream)

        if tenant_id:
            upstream[Header.TENANT_ID] = tenant_id
        return upstream

    def copy_allowed(
        self,
        inbound: Mapping[str, Any],
        upstream: httpx.Headers,
    ) -> httpx.Headers:
        """Copy allow-listed inbound headers; everything else stays behind."""
        lowered = {str(key).lower(): value for key, value in inbound.items()}
        for name in self._allowed:
            value = lowered.get(name)
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                for v in _as_values(value):
                    upstream = append_header(upstream, name, v)
            else:
                upstream[name] = str(value)
        return upstream
