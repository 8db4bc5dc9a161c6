# fazenda/infra/db.py
"""
Handle de conexão SQLite.

Uma única conexão por instalação, aberta explicitamente pelo ponto de
entrada e injetada nos repositórios.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional


class Database:
    """
    Conexão SQLite de longa duração com:
    - foreign_keys ON durante toda a vida do handle
    - row_factory = sqlite3.Row
    - sessões que fazem commit ao sair (rollback em caso de exceção)
    """

    def __init__(self, conn: sqlite3.Connection, path: str):
        self.conn = conn
        self.path = path

    @classmethod
    def open(cls, db_path: str) -> "Database":
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        return cls(conn, db_path)

    @contextmanager
    def session(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self.conn
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

    def foreign_keys_enabled(self) -> bool:
        return bool(self.conn.execute("PRAGMA foreign_keys;").fetchone()[0])

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None
