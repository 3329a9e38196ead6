"""
데이터베이스 어댑터

SQLite WAL 모드 연결 관리.
"""

from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
    init_schema,
    rows_to_dicts,
)

__all__ = [
    "SQLiteAdapter",
    "create_connection",
    "init_schema",
    "rows_to_dicts",
]
