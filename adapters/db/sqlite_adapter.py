"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
자동 커밋 연결 위에서 명시적 트랜잭션(BEGIN IMMEDIATE)으로 작업 단위 보장.

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.errors import StoreFailure

logger = logging.getLogger(__name__)


async def create_connection(
    db_path: Path | str,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    isolation_level=None(자동 커밋)으로 열어 트랜잭션 경계를
    SQLiteAdapter.transaction()에서만 관리.

    Args:
        db_path: DB 파일 경로 (":memory:" 허용)

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)
    in_memory = db_path_str == ":memory:"

    if not in_memory:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path_str, isolation_level=None)

    if not in_memory:
        await conn.execute("PRAGMA journal_mode=WAL")

    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.info(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    하나의 연결을 여러 요청 태스크가 공유하므로 트랜잭션은
    asyncio.Lock으로 직렬화됨. 다른 연결과는 BEGIN IMMEDIATE의
    쓰기 잠금으로 직렬화됨.

    Args:
        db_path: DB 파일 경로

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction() as conn:
        await conn.execute("UPDATE users SET balance = balance - ? ...")
        await conn.execute("INSERT INTO withdrawals ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str):
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._tx_lock = asyncio.Lock()
        self._tx_owner: asyncio.Task[Any] | None = None

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """현재 태스크가 트랜잭션 안에 있는지 여부"""
        return self._tx_owner is not None and self._tx_owner is asyncio.current_task()

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        return self._conn

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행 (트랜잭션 밖에서는 즉시 커밋)"""
        conn = self._require_conn()

        if parameters:
            return await conn.execute(sql, parameters)
        return await conn.execute(sql)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외(태스크 취소 포함) 시 자동 롤백.
        도메인 에러(LedgerError)는 그대로, 그 외 DB 에러는
        StoreFailure로 변환하여 전파.

        같은 태스크에서 중첩 호출하면 바깥 작업 단위에 합류하며
        커밋/롤백은 바깥 트랜잭션이 결정.

        사용 예시:
        ```python
        async with adapter.transaction() as conn:
            await conn.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        conn = self._require_conn()

        if self.in_transaction:
            yield conn
            return

        async with self._tx_lock:
            self._tx_owner = asyncio.current_task()
            try:
                await conn.execute("BEGIN IMMEDIATE")
                try:
                    yield conn
                except BaseException as e:
                    await self._safe_rollback(conn)
                    if isinstance(e, aiosqlite.Error):
                        logger.error(f"트랜잭션 실패, 롤백 완료: {e}")
                        raise StoreFailure("Store transaction failed") from e
                    raise

                try:
                    await conn.commit()
                except aiosqlite.Error as e:
                    await self._safe_rollback(conn)
                    logger.error(f"커밋 실패, 롤백 완료: {e}")
                    raise StoreFailure("Store commit failed") from e
            finally:
                self._tx_owner = None

    async def _safe_rollback(self, conn: aiosqlite.Connection) -> None:
        """롤백 (롤백 자체의 실패는 로그만 남김)"""
        try:
            if conn.in_transaction:
                await conn.rollback()
        except aiosqlite.Error as e:
            logger.error(f"롤백 실패: {e}")

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def rows_to_dicts(
    cursor: aiosqlite.Cursor,
    rows: list[tuple[Any, ...]] | Any,
) -> list[dict[str, Any]]:
    """커서 컬럼명으로 행을 dict로 변환"""
    columns = [desc[0] for desc in cursor.description]
    return [dict(zip(columns, row)) for row in rows]


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    여러 번 호출해도 안전 (IF NOT EXISTS).

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    # users (balance = 기본 통화 레거시 잔고)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            username         TEXT NOT NULL UNIQUE,
            password         TEXT,
            balance          REAL NOT NULL DEFAULT 0,
            status           TEXT NOT NULL DEFAULT 'active',
            min_trade_amount REAL NOT NULL DEFAULT 10,
            trade_settings   TEXT NOT NULL DEFAULT '[]',
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # user_balances (통화별 잔고)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS user_balances (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            username         TEXT NOT NULL,
            currency         TEXT NOT NULL,
            amount           REAL NOT NULL DEFAULT 0,
            UNIQUE(username, currency)
        )
    """)

    # deposits (입금 요청)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS deposits (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            username         TEXT NOT NULL,
            currency         TEXT NOT NULL,
            network          TEXT NOT NULL,
            amount           REAL NOT NULL,
            proof_image      TEXT,
            status           TEXT NOT NULL DEFAULT 'pending',
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # withdrawals (출금 요청, 제출 시 이미 차감됨)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS withdrawals (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            username         TEXT NOT NULL,
            currency         TEXT NOT NULL,
            network          TEXT NOT NULL,
            amount           REAL NOT NULL,
            address          TEXT NOT NULL,
            status           TEXT NOT NULL DEFAULT 'pending',
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # trades (정산/환전 감사 로그, append-only)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS trades (
            id               INTEGER PRIMARY KEY AUTOINCREMENT,
            username         TEXT NOT NULL,
            symbol           TEXT NOT NULL,
            side             TEXT NOT NULL,
            amount           REAL NOT NULL,
            profit           REAL NOT NULL,
            result           TEXT NOT NULL,
            created_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # config_store (런타임 설정)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS config_store (
            id           INTEGER PRIMARY KEY AUTOINCREMENT,
            config_key   TEXT NOT NULL UNIQUE,
            value_json   TEXT NOT NULL,
            version      INTEGER NOT NULL DEFAULT 1,

            updated_by   TEXT NOT NULL,
            created_at   TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at   TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # 인덱스 생성
    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_deposits_user
        ON deposits(username)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_withdrawals_user
        ON withdrawals(username)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_trades_user
        ON trades(username)
    """)

    logger.info("스키마 초기화 완료")
