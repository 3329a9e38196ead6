"""
잔고 저장소 (Balance Store)

users.balance (기본 통화 레거시 잔고)와 user_balances (통화별 잔고)
두 표현에 대한 원시 읽기/쓰기.

주의: 이 클래스는 트랜잭션을 열지 않음. 다단계 변경은 반드시
LedgerEngine이 여는 작업 단위 안에서 호출해야 함.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.ledger.types import BalanceEntry

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class BalanceStore:
    """잔고 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # -------------------------------------------------------------------------
    # 레거시 잔고 (users.balance)
    # -------------------------------------------------------------------------

    async def get_legacy_balance(self, username: str) -> float | None:
        """레거시 잔고 조회

        Returns:
            잔고 또는 None (사용자 없음)
        """
        row = await self.db.fetchone(
            "SELECT balance FROM users WHERE username = ?",
            (username,),
        )
        if row is None:
            return None
        return float(row[0] or 0)

    async def add_legacy(self, username: str, delta: float) -> bool:
        """레거시 잔고 가감 (부호 있는 delta)

        Returns:
            사용자 행이 갱신되었는지 여부
        """
        cursor = await self.db.execute(
            "UPDATE users SET balance = balance + ? WHERE username = ?",
            (delta, username),
        )
        return cursor.rowcount > 0

    # -------------------------------------------------------------------------
    # 통화별 잔고 (user_balances)
    # -------------------------------------------------------------------------

    async def get_entry(self, username: str, currency: str) -> float | None:
        """통화별 잔고 조회

        Returns:
            잔고 또는 None (항목 없음 = 0으로 취급)
        """
        row = await self.db.fetchone(
            """
            SELECT amount
            FROM user_balances
            WHERE username = ? AND currency = ?
            """,
            (username, currency),
        )
        if row is None:
            return None
        return float(row[0] or 0)

    async def list_entries(self, username: str) -> list[BalanceEntry]:
        """사용자의 통화별 잔고 목록"""
        rows = await self.db.fetchall(
            """
            SELECT currency, amount
            FROM user_balances
            WHERE username = ?
            ORDER BY currency
            """,
            (username,),
        )
        return [BalanceEntry(currency=row[0], amount=float(row[1] or 0)) for row in rows]

    async def upsert_entry(self, username: str, currency: str, delta: float) -> None:
        """통화별 잔고 가감 (없으면 delta로 생성)"""
        await self.db.execute(
            """
            INSERT INTO user_balances (username, currency, amount)
            VALUES (?, ?, ?)
            ON CONFLICT(username, currency) DO UPDATE SET
                amount = user_balances.amount + excluded.amount
            """,
            (username, currency, delta),
        )

    async def deduct_entry(self, username: str, currency: str, amount: float) -> bool:
        """통화별 잔고 차감 (잔고가 amount 이상일 때만)

        Returns:
            차감 여부 (항목 없음 또는 부족 시 False)
        """
        cursor = await self.db.execute(
            """
            UPDATE user_balances
            SET amount = amount - ?
            WHERE username = ? AND currency = ? AND amount >= ?
            """,
            (amount, username, currency, amount),
        )
        return cursor.rowcount > 0
