"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from api.handlers import (
    handle_all_users,
    handle_checklist,
    handle_delete_user,
    handle_generate_api_key,
    handle_read_user,
    handle_remove_app_roles,
    handle_save_user,
    handle_send_email,
)
from api.dependencies import require_credentials
from api.middleware import CorrelationIdMiddleware
from core.config import Config
from core.exceptions import InvalidJSON, RequestTooLarge, UpstreamError
from core.headers import HeaderBuilder
from core.models import ApiKeyRequest, EmailMessage
from core.protocols import RequestLogger
from services.worker import WorkerClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.limits.max_connections,
            max_keepalive_connections=config.limits.max_keepalive_connections,
        )
        worker_client = httpx.AsyncClient(
            timeout=config.worker.timeout,
            limits=limits,
            transport=transport,
        )
        app.state.worker_client = WorkerClient(
            worker_client,
            config.worker,
            logger,
            header_builder=HeaderBuilder(),
        )
        try:
            yield
        finally:
            await worker_client.aclose()

    app = FastAPI(
        title="Worker Bridge",
        version="0.1.0",
        lifespan=lifespan,
        dependencies=[Depends(require_credentials)],
    )
    app.add_middleware(CorrelationIdMiddleware)

    @app.exception_handler(RequestTooLarge)
    async def request_too_large(request: Request, exc: RequestTooLarge):
        return JSONResponse({"error": str(exc)}, status_code=413)

    @app.exception_handler(InvalidJSON)
    async def invalid_json(request: Request, exc: InvalidJSON):
        return JSONResponse({"error": str(exc)}, status_code=400)

    @app.exception_handler(UpstreamError)
    async def upstream_error(request: Request, exc: UpstreamError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code or 502)

    @app.get("/api/users")
    async def all_users(request: Request):
        return await handle_all_users(request, config)

    @app.post("/api/users")
    async def save_user(request: Request):
        return await handle_save_user(request, config)

    @app.get("/api/users/{user_id}")
    async def read_user(request: Request, user_id: str):
        return await handle_read_user(request, config)

    @app.delete("/api/users/{user_id}")
    async def delete_user(request: Request, user_id: str):
        return await handle_delete_user(request, config)

    @app.delete("/api/applications/{app_id}/roles")
    async def remove_app_roles(request: Request, app_id: str):
        return await handle_remove_app_roles(request, config)

    @app.post("/api/email")
    async def send_email(request: Request, message: EmailMessage):
        return await handle_send_email(request, config, message)

    @app.post("/api/self/api_key")
    async def generate_api_key(request: Request, payload: ApiKeyRequest):
        return await handle_generate_api_key(request, config, payload)

    @app.get("/api/checklist")
    async def checklist(request: Request):
        return await handle_checklist(request, config)

    return app
