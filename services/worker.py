"""Calls from the app server to the worker service."""

from typing import Any

import httpx

from core.config import WorkerSettings
from core.correlation import DEFAULT_CORRELATION, CorrelationIds
from core.errors import FRAMEWORK, RAISE_TO_CALLER
from core.exceptions import UpstreamConnectionError, UpstreamTimeoutError
from core.forwarder import build_request, check_response
from core.headers import HeaderBuilder
from core.models import EmailMessage
from core.protocols import RequestLogger
from core.request_types import RequestContext, RequestInit
from core.urls import get_prod_app_id, path_segment, worker_url


class WorkerClient:
    """Forward app server operations to the worker's global API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: WorkerSettings,
        logger: RequestLogger,
        *,
        correlation: CorrelationIds = DEFAULT_CORRELATION,
        header_builder: HeaderBuilder | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._logger = logger
        self._correlation = correlation
        self._headers = header_builder or HeaderBuilder()

    # Worker operations -----------------------------------------------------

    async def send_smtp_email(
        self,
        message: EmailMessage,
        *,
        tenant_id: str | None = None,
        ctx: RequestContext | None = None,
    ) -> Any:
        """Send an email.

        The tenant is explicit as automations have no request. Without ``ctx``
        the call authenticates with the internal API key.
        """
        response = await self._send(
            "send email",
            "/api/global/email/send",
            RequestInit(method="POST", body=message.worker_payload()),
            context=ctx,
            tenant_id=tenant_id,
        )
        return check_response(response, "send email")

    async def remove_app_from_user_roles(self, ctx: RequestContext, app_id: str) -> Any:
        response = await self._send(
            "remove app role",
            f"/api/global/roles/{path_segment(get_prod_app_id(app_id))}",
            RequestInit(method="DELETE"),
            context=ctx,
        )
        return check_response(response, "remove app role")

    async def all_global_users(self, ctx: RequestContext) -> Any:
        response = await self._send(
            "get users",
            "/api/global/users",
            RequestInit(method="GET"),
            context=ctx,
        )
        return check_response(response, "get users", FRAMEWORK)

    async def save_global_user(self, ctx: RequestContext) -> Any:
        response = await self._send(
            "save user",
            "/api/global/users",
            RequestInit(method="POST", body=ctx.body),
            context=ctx,
        )
        return check_response(response, "save user", FRAMEWORK)

    async def delete_global_user(self, ctx: RequestContext) -> Any:
        response = await self._send(
            "delete user",
            f"/api/global/users/{path_segment(ctx.params['user_id'])}",
            RequestInit(method="DELETE"),
            context=ctx,
        )
        return check_response(response, "delete user", FRAMEWORK)

    async def read_global_user(self, ctx: RequestContext) -> Any:
        response = await self._send(
            "get user",
            f"/api/global/users/{path_segment(ctx.params['user_id'])}",
            RequestInit(method="GET"),
            context=ctx,
        )
        return check_response(response, "get user", FRAMEWORK)

    async def get_checklist(
        self,
        *,
        tenant_id: str | None = None,
        ctx: RequestContext | None = None,
    ) -> Any:
        response = await self._send(
            "get checklist",
            "/api/global/configs/checklist",
            RequestInit(method="GET"),
            context=ctx,
            tenant_id=tenant_id,
        )
        return check_response(response, "get checklist", RAISE_TO_CALLER)

    async def generate_api_key(
        self,
        user_id: str,
        *,
        tenant_id: str | None = None,
        ctx: RequestContext | None = None,
    ) -> Any:
        response = await self._send(
            "generate API key",
            "/api/global/self/api_key",
            RequestInit(method="POST", body={"userId": user_id}),
            context=ctx,
            tenant_id=tenant_id,
        )
        return check_response(response, "generate API key", RAISE_TO_CALLER)

    # Transport -------------------------------------------------------------

    async def _send(
        self,
        operation: str,
        path: str,
        init: RequestInit,
        *,
        context: RequestContext | None = None,
        tenant_id: str | None = None,
    ) -> httpx.Response:
        """Build, log and send one worker request."""
        if context is not None and tenant_id is None:
            tenant_id = context.tenant_id

        request = build_request(
            init,
            context=context,
            tenant_id=tenant_id,
            api_key=self._settings.internal_api_key,
            correlation=self._correlation,
            header_builder=self._headers,
        )
        url = worker_url(self._settings.base_url, path)
        self._logger.log_worker_call(
            operation,
            request.method,
            url,
            dict(request.headers),
            body=request.body,
        )

        try:
            response = await self._client.request(
                request.method,
                url,
                timeout=self._settings.timeout,
                **request.send_kwargs(),
            )
        except httpx.TimeoutException as e:
            self._logger.log_error(operation, 504, "Worker timeout")
            raise UpstreamTimeoutError(
                f"Unable to {operation} - worker timeout", provider="worker"
            ) from e
        except httpx.RequestError as e:
            self._logger.log_error(operation, 502, str(e))
            raise UpstreamConnectionError(
                f"Unable to {operation} - worker connection error: {e}", provider="worker"
            ) from e

        self._logger.log_worker_result(operation, response.status_code)
        if response.status_code >= 300:
            self._logger.log_error(operation, response.status_code, response.text)
        return response
