from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.engine import Connection, Engine

from .engine import get_engine
from .models import kv_entries, metadata
from .session import connection_scope


def ensure_schema(conn: Connection) -> None:
    metadata.create_all(bind=conn, checkfirst=True)


class SqlKeyValueStore:
    """Key/value slots in SQLite, visible to every process opening the same file."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        with connection_scope(self.engine) as conn:
            ensure_schema(conn)

    @classmethod
    def at(cls, db_path: Path) -> SqlKeyValueStore:
        return cls(get_engine(db_path))

    def get(self, key: str) -> str | None:
        with connection_scope(self.engine) as conn:
            row = conn.execute(select(kv_entries.c.value).where(kv_entries.c.key == key)).first()
        return None if row is None else str(row[0])

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat(timespec="seconds")
        stmt = insert(kv_entries).values(key=key, value=value, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[kv_entries.c.key],
            set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
        )
        with connection_scope(self.engine) as conn:
            conn.execute(stmt)

    def delete(self, key: str) -> None:
        with connection_scope(self.engine) as conn:
            conn.execute(delete(kv_entries).where(kv_entries.c.key == key))
