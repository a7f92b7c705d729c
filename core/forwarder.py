"""Build worker requests and interpret worker responses."""

import json
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from core.correlation import DEFAULT_CORRELATION, CorrelationIds
from core.errors import RAISE_TO_CALLER, ErrorChannel
from core.headers import HeaderBuilder
from core.request_types import OutboundRequest, RequestContext, RequestInit

JSON_CONTENT_TYPE = "application/json"

_default_builder = HeaderBuilder()


def build_request(
    init: RequestInit,
    *,
    context: RequestContext | None = None,
    tenant_id: str | None = None,
    api_key: str | None = None,
    correlation: CorrelationIds = DEFAULT_CORRELATION,
    header_builder: HeaderBuilder = _default_builder,
) -> OutboundRequest:
    """Turn a request initializer into an outbound worker request.

    With no ``context`` the internal ``api_key`` authenticates the call;
    with one, the allow-listed inbound headers are forwarded instead. The
    tenant header is set whenever ``tenant_id`` is given.
    """
    headers = header_builder.build_worker_headers(
        init.headers,
        context=context,
        tenant_id=tenant_id,
        api_key=api_key,
    )

    body = serialize_body(init.body)
    if body is not None:
        headers["Content-Type"] = JSON_CONTENT_TYPE

    correlation.set_header(headers)
    return OutboundRequest(method=init.method.upper(), headers=headers, body=body)


def serialize_body(body: Any) -> str | bytes | None:
    """JSON-encode a body; ``None`` when there is nothing to send.

    Strings and bytes are treated as already-encoded JSON. Only non-empty
    mappings and sequences are encoded; anything else is dropped.
    """
    if isinstance(body, (str, bytes)):
        return body or None
    if isinstance(body, (Mapping, Sequence)) and len(body) > 0:
        return json.dumps(body)
    return None


def error_detail(response: httpx.Response) -> str:
    """Extract the most useful error text from a failed worker response."""
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        error = response.json()
        if isinstance(error, dict) and error.get("message") is not None:
            return str(error["message"])
        return json.dumps(error, separators=(",", ":"))
    return response.text


def check_response(
    response: httpx.Response,
    operation: str,
    channel: ErrorChannel = RAISE_TO_CALLER,
) -> Any:
    """Return the parsed JSON body, or report the failure through ``channel``.

    A success response whose body is not JSON raises ``json.JSONDecodeError``.
    """
    if response.status_code >= 300:
        message = f"Unable to {operation} - {error_detail(response)}"
        channel.fail(response.status_code or 500, message, operation=operation)
    return response.json()
