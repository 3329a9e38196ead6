"""
User Store

users 테이블 CRUD 처리 (잔고 컬럼 제외).
잔고 변경은 LedgerEngine에서만 수행.
"""

import json
import logging

from adapters.db.sqlite_adapter import SQLiteAdapter, rows_to_dicts
from core.ledger.types import TradeTier, User
from core.types import AccountStatus

logger = logging.getLogger(__name__)


class UserStore:
    """User Store

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def get(self, username: str) -> User | None:
        """사용자 조회

        Args:
            username: 사용자 핸들

        Returns:
            User 또는 None
        """
        cursor = await self.db.execute(
            "SELECT * FROM users WHERE username = ?",
            (username,),
        )
        row = await cursor.fetchone()
        if not row:
            return None

        return User.from_row(rows_to_dicts(cursor, [row])[0])

    async def list_all(self) -> list[User]:
        """전체 사용자 목록 (가입순)"""
        cursor = await self.db.execute("SELECT * FROM users ORDER BY id")
        rows = await cursor.fetchall()
        return [User.from_row(r) for r in rows_to_dicts(cursor, rows)]

    async def create(self, username: str, balance: float = 0.0) -> User:
        """사용자 생성

        호출자가 중복 여부를 먼저 확인해야 함.
        """
        await self.db.execute(
            "INSERT INTO users (username, balance) VALUES (?, ?)",
            (username, balance),
        )
        logger.info(f"User created: {username}")
        return await self.get(username)  # type: ignore

    async def set_status(self, username: str, status: AccountStatus) -> bool:
        """계정 상태 변경

        Returns:
            갱신 여부 (사용자 없으면 False)
        """
        cursor = await self.db.execute(
            "UPDATE users SET status = ? WHERE username = ?",
            (status.value, username),
        )
        return cursor.rowcount > 0

    async def update_trade_settings(
        self,
        username: str,
        min_trade_amount: float,
        tiers: list[TradeTier],
    ) -> bool:
        """최소 거래 금액 및 거래 등급 변경

        Returns:
            갱신 여부 (사용자 없으면 False)
        """
        settings_json = json.dumps([t.to_dict() for t in tiers])
        cursor = await self.db.execute(
            """
            UPDATE users
            SET min_trade_amount = ?, trade_settings = ?
            WHERE username = ?
            """,
            (min_trade_amount, settings_json, username),
        )
        return cursor.rowcount > 0

    async def count(self, status: AccountStatus | None = None) -> int:
        """사용자 수"""
        if status is None:
            row = await self.db.fetchone("SELECT COUNT(*) FROM users")
        else:
            row = await self.db.fetchone(
                "SELECT COUNT(*) FROM users WHERE status = ?",
                (status.value,),
            )
        return int(row[0]) if row else 0

    async def count_created_on(self, day: str) -> int:
        """특정 날짜(YYYY-MM-DD) 가입자 수"""
        row = await self.db.fetchone(
            "SELECT COUNT(*) FROM users WHERE date(created_at) = ?",
            (day,),
        )
        return int(row[0]) if row else 0

