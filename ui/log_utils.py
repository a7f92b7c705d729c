"""Shared logging utilities."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from core.correlation import get_correlation_id

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"

SENSITIVE_MARKERS = ("key", "authorization", "token", "cookie", "session")


def write_incoming_log(
    method: str,
    path: str,
    headers: dict[str, str],
    body: Any,
    *,
    log_root: Path | None = None,
) -> Path:
    """Write a single incoming request log entry."""
    log_root = log_root or LOG_ROOT
    payload = {
        "timestamp": _utc_now(),
        "correlation_id": get_correlation_id(),
        "method": method,
        "path": path,
        "headers": redact_headers(headers),
        "body": body,
    }
    return _write_json(log_root / "incoming", payload)


def write_worker_log(
    operation: str,
    method: str,
    url: str,
    headers: dict[str, str],
    body: Any,
    *,
    log_root: Path | None = None,
) -> Path:
    """Write a single outbound worker request log entry."""
    log_root = log_root or LOG_ROOT
    payload = {
        "timestamp": _utc_now(),
        "target": "worker",
        "operation": operation,
        "method": method,
        "url": url,
        "headers": redact_headers(headers),
        "body": _decode_body(body),
    }
    return _write_json(log_root / "worker" / _folder_name(operation), payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_file or CLI_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    correlation_id = get_correlation_id()
    if correlation_id and "correlation_id" not in extra:
        extra["correlation_id"] = correlation_id
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path | None = None) -> int:
    """Delete JSON request logs from a previous run."""
    log_root = log_root or LOG_ROOT
    if not log_root.exists():
        return 0
    deleted = 0
    for old_file in log_root.rglob("*.json"):
        try:
            old_file.unlink()
            deleted += 1
        except OSError:
            pass
    return deleted


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if any(marker in key.lower() for marker in SENSITIVE_MARKERS):
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _folder_name(operation: str) -> str:
    return operation.strip().lower().replace(" ", "_") or "unknown"


def _decode_body(body: Any) -> Any:
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            return json.loads(body)
        except ValueError:
            return body
    return body


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
