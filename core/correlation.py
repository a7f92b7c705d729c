"""Correlation ids shared by every worker call of one logical operation."""

from contextvars import ContextVar
from uuid import uuid4

import httpx

from core.headers import Header

correlation_id_ctx_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def new_correlation_id() -> str:
    return uuid4().hex


def get_correlation_id() -> str | None:
    return correlation_id_ctx_var.get()


class CorrelationIds:
    """Read, create and stamp the current correlation id."""

    header = Header.CORRELATION_ID

    def current(self) -> str:
        """Return the active id, or a fresh one when no operation is active.

        A fresh id is not stored, so unrelated calls never share it.
        """
        return correlation_id_ctx_var.get() or new_correlation_id()

    def set_header(self, headers: httpx.Headers) -> str:
        correlation_id = self.current()
        headers[self.header] = correlation_id
        return correlation_id


DEFAULT_CORRELATION = CorrelationIds()
