"""URL helpers for worker endpoints."""

import re
from urllib.parse import quote

APP_PREFIX = "app_"
APP_DEV_PREFIX = "app_dev_"

_SLASHES = re.compile(r"(https?://)|(/)+")


def check_slashes_in_url(url: str) -> str:
    """Collapse repeated slashes, leaving the scheme's ``//`` alone."""
    return _SLASHES.sub(lambda m: m.group(1) or m.group(2), url)


def path_segment(value: str) -> str:
    """Quote a value for use as a single URL path segment.

    Slashes and query characters are escaped, and dot segments are encoded so
    the URL parser cannot resolve them.
    """
    segment = quote(value, safe="")
    if segment in (".", ".."):
        return segment.replace(".", "%2E")
    return segment


def worker_url(base_url: str, path: str) -> str:
    """Join the worker base URL and an API path."""
    return check_slashes_in_url(f"{base_url}/{path}")


def get_prod_app_id(app_id: str) -> str:
    """Map a development app id to its production id."""
    if not app_id or not app_id.startswith(APP_DEV_PREFIX):
        return app_id
    return APP_PREFIX + app_id[len(APP_DEV_PREFIX):]
