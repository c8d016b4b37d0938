from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.engine import Connection, Engine


@contextmanager
def connection_scope(engine: Engine) -> Iterator[Connection]:
    with engine.begin() as conn:
        yield conn
