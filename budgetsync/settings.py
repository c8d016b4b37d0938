from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env(key: str, default: str | None = None, *, legacy: tuple[str, ...] = ()) -> str | None:
    """
    Read an env var with optional legacy fallbacks.

    We treat empty strings as "unset" to avoid surprising behavior when users
    export variables but forget to assign values.
    """
    for k in (key, *legacy):
        v = os.environ.get(k)
        if v is not None and str(v).strip() != "":
            return v
    return default


def _parse_bool(v: str | None, default: bool) -> bool:
    if v is None:
        return default
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_int(v: str | None, default: int) -> int:
    if v is None:
        return default
    try:
        return int(str(v).strip())
    except Exception:
        return default


SYNC_TRANSPORT_CHOICES = ("auto", "bus", "storage")


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    log_level: str
    log_json: bool
    log_path: str | None
    log_rotation_mb: int
    log_retention_days: int
    db_path: Path
    sync_transport: str
    sync_channel: str
    sync_key: str
    index_key: str


def load_settings() -> Settings:
    host = _env("BUDGETSYNC_HOST", "127.0.0.1") or "127.0.0.1"
    port = _parse_int(_env("BUDGETSYNC_PORT", "8000"), 8000)

    log_level = (_env("BUDGETSYNC_LOG_LEVEL", "INFO") or "INFO").upper()
    log_json = _parse_bool(_env("BUDGETSYNC_LOG_JSON", None), False)
    log_path = _env("BUDGETSYNC_LOG_PATH", None)
    log_rotation_mb = _parse_int(_env("BUDGETSYNC_LOG_ROTATION_MB", "10"), 10)
    if log_rotation_mb <= 0:
        log_rotation_mb = 10
    log_retention_days = _parse_int(_env("BUDGETSYNC_LOG_RETENTION_DAYS", "30"), 30)
    if log_retention_days <= 0:
        log_retention_days = 30

    db_path = Path(_env("BUDGETSYNC_DB_PATH", "data/budgetsync.sqlite3") or "data/budgetsync.sqlite3")

    sync_transport = (_env("BUDGETSYNC_SYNC_TRANSPORT", "auto") or "auto").strip().lower()
    if sync_transport not in SYNC_TRANSPORT_CHOICES:
        # Unknown values behave like "auto"; transport selection never fails startup.
        sync_transport = "auto"
    sync_channel = _env("BUDGETSYNC_SYNC_CHANNEL", "budgetsync_sync") or "budgetsync_sync"
    sync_key = _env("BUDGETSYNC_SYNC_KEY", "budgetsync_sync_event") or "budgetsync_sync_event"
    index_key = _env("BUDGETSYNC_INDEX_KEY", "budgetsync_monthly_index") or "budgetsync_monthly_index"

    return Settings(
        host=host,
        port=port,
        log_level=log_level,
        log_json=log_json,
        log_path=log_path,
        log_rotation_mb=log_rotation_mb,
        log_retention_days=log_retention_days,
        db_path=db_path,
        sync_transport=sync_transport,
        sync_channel=sync_channel,
        sync_key=sync_key,
        index_key=index_key,
    )
