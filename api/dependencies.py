"""Request dependencies shared by every route."""

from fastapi import HTTPException, Request, status

from core.headers import Header

# Inbound headers that identify the caller to the worker
CREDENTIAL_HEADERS: tuple[str, ...] = (
    Header.AUTHORIZATION,
    Header.API_KEY,
    Header.SESSION_ID,
    Header.TOKEN,
)


def require_credentials(request: Request) -> None:
    """Reject requests that carry no caller credentials.

    The worker authenticates the forwarded headers; the internal API key is
    never lent to an inbound request.
    """
    if not any(request.headers.get(name, "").strip() for name in CREDENTIAL_HEADERS):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing credentials",
        )
