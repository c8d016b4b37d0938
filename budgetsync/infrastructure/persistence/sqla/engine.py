from __future__ import annotations

import atexit
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

# Several processes may share one ledger file; writers wait this long for the lock.
BUSY_TIMEOUT_MS = 5000

_engines: dict[Path, Engine] = {}


def _on_connect(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}")
    finally:
        cursor.close()


def get_engine(db_path: Path) -> Engine:
    """Shared engine per resolved database file, created on first use."""
    key = db_path.resolve()
    if key not in _engines:
        key.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite+pysqlite:///{key}",
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _on_connect)
        _engines[key] = engine
    return _engines[key]


def dispose_engine(db_path: Path) -> None:
    engine = _engines.pop(db_path.resolve(), None)
    if engine is not None:
        engine.dispose()


@atexit.register
def dispose_all_engines() -> None:
    while _engines:
        _, engine = _engines.popitem()
        engine.dispose()
