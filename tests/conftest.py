"""
pytest 공통 fixture 정의

인메모리 SQLite + 스키마 + 기본 설정, 사용자 생성 헬퍼.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.ledger.engine import LedgerEngine
from core.storage.config_store import ConfigStore, init_default_configs


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """OS 독립적인 임시 디렉토리"""
    return tmp_path


@pytest_asyncio.fixture
async def db() -> AsyncIterator[SQLiteAdapter]:
    """스키마가 초기화된 인메모리 DB"""
    adapter = SQLiteAdapter(":memory:")
    await adapter.connect()
    await init_schema(adapter)
    await init_default_configs(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def ledger(db: SQLiteAdapter) -> LedgerEngine:
    return LedgerEngine(db, primary_currency="USDT")


@pytest.fixture
def config_store(db: SQLiteAdapter) -> ConfigStore:
    return ConfigStore(db)


@pytest.fixture
def make_user(db: SQLiteAdapter) -> Callable[..., Awaitable[str]]:
    """사용자 생성 헬퍼

    레거시 잔고와 통화별 잔고를 원하는 상태로 직접 기록.
    (미러 불일치 상태를 만들기 위해 LedgerEngine을 거치지 않음)
    """

    async def _make_user(
        username: str,
        balance: float = 0.0,
        mirror: float | None = None,
        coins: dict[str, float] | None = None,
        status: str = "active",
        min_trade_amount: float = 10.0,
        trade_settings: str = "[]",
    ) -> str:
        await db.execute(
            """
            INSERT INTO users (username, balance, status, min_trade_amount, trade_settings)
            VALUES (?, ?, ?, ?, ?)
            """,
            (username, balance, status, min_trade_amount, trade_settings),
        )
        if mirror is not None:
            await db.execute(
                "INSERT INTO user_balances (username, currency, amount) VALUES (?, 'USDT', ?)",
                (username, mirror),
            )
        for currency, amount in (coins or {}).items():
            await db.execute(
                "INSERT INTO user_balances (username, currency, amount) VALUES (?, ?, ?)",
                (username, currency, amount),
            )
        return username

    return _make_user


@pytest.fixture
def read_balances(db: SQLiteAdapter) -> Callable[[str], Awaitable[tuple[float, dict[str, float]]]]:
    """(레거시 잔고, {통화: 잔고}) 조회 헬퍼"""

    async def _read(username: str) -> tuple[float, dict[str, float]]:
        row = await db.fetchone("SELECT balance FROM users WHERE username = ?", (username,))
        rows = await db.fetchall(
            "SELECT currency, amount FROM user_balances WHERE username = ?",
            (username,),
        )
        return float(row[0]), {r[0]: float(r[1]) for r in rows}

    return _read
