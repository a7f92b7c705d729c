"""FastAPI route handlers."""

import json
from json import JSONDecodeError
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from core.config import Config
from core.exceptions import InvalidJSON, RequestTooLarge
from core.headers import Header
from core.models import ApiKeyRequest, EmailMessage
from core.request_types import RequestContext
from services.worker import WorkerClient
from ui.log_utils import write_incoming_log


async def _parse_json_body(request: Request, max_size: int) -> Any:
    """Parse the request body as JSON; an empty body gives ``None``."""
    raw_body = await request.body()
    if len(raw_body) > max_size:
        raise RequestTooLarge("Request body too large")
    if not raw_body.strip():
        return None

    text_body = raw_body.decode("utf-8", errors="replace")
    try:
        return json.loads(text_body)
    except (JSONDecodeError, ValueError) as e:
        write_incoming_log(request.method, request.url.path, dict(request.headers), text_body)
        raise InvalidJSON(f"Invalid JSON: {e}") from e


def _inbound_headers(request: Request) -> dict[str, str | list[str]]:
    """Collect inbound headers, keeping every value of a repeated header."""
    headers: dict[str, str | list[str]] = {}
    for key, value in request.headers.items():
        existing = headers.get(key)
        if existing is None:
            headers[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            headers[key] = [existing, value]
    return headers


def resolve_tenant_id(request: Request, config: Config) -> str | None:
    return request.headers.get(Header.TENANT_ID) or config.tenancy.default_tenant_id


async def build_context(
    request: Request,
    config: Config,
    *,
    read_body: bool = False,
) -> RequestContext:
    """Capture what the worker calls need from the inbound request."""
    body = await _parse_json_body(request, config.limits.max_body_size) if read_body else None
    headers = _inbound_headers(request)
    write_incoming_log(request.method, request.url.path, dict(request.headers), body)
    return RequestContext(
        headers=headers,
        tenant_id=resolve_tenant_id(request, config),
        params=dict(request.path_params),
        body=body,
    )


def _worker(request: Request) -> WorkerClient:
    return request.app.state.worker_client


async def handle_all_users(request: Request, config: Config) -> JSONResponse:
    """Handle GET /api/users."""
    ctx = await build_context(request, config)
    return JSONResponse(await _worker(request).all_global_users(ctx))


async def handle_save_user(request: Request, config: Config) -> JSONResponse:
    """Handle POST /api/users."""
    ctx = await build_context(request, config, read_body=True)
    return JSONResponse(await _worker(request).save_global_user(ctx))


async def handle_read_user(request: Request, config: Config) -> JSONResponse:
    """Handle GET /api/users/{user_id}."""
    ctx = await build_context(request, config)
    return JSONResponse(await _worker(request).read_global_user(ctx))


async def handle_delete_user(request: Request, config: Config) -> JSONResponse:
    """Handle DELETE /api/users/{user_id}."""
    ctx = await build_context(request, config)
    return JSONResponse(await _worker(request).delete_global_user(ctx))


async def handle_remove_app_roles(request: Request, config: Config) -> JSONResponse:
    """Handle DELETE /api/applications/{app_id}/roles."""
    ctx = await build_context(request, config)
    result = await _worker(request).remove_app_from_user_roles(ctx, ctx.params["app_id"])
    return JSONResponse(result)


async def handle_send_email(
    request: Request,
    config: Config,
    message: EmailMessage,
) -> JSONResponse:
    """Handle POST /api/email."""
    ctx = await build_context(request, config)
    return JSONResponse(await _worker(request).send_smtp_email(message, ctx=ctx))


async def handle_generate_api_key(
    request: Request,
    config: Config,
    payload: ApiKeyRequest,
) -> JSONResponse:
    """Handle POST /api/self/api_key."""
    ctx = await build_context(request, config)
    return JSONResponse(await _worker(request).generate_api_key(payload.user_id, ctx=ctx))


async def handle_checklist(request: Request, config: Config) -> JSONResponse:
    """Handle GET /api/checklist."""
    ctx = await build_context(request, config)
    return JSONResponse(await _worker(request).get_checklist(ctx=ctx))
