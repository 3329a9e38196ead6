"""
Trade Store

trades 테이블 (append-only 감사 로그). 수정/삭제 API 없음.
"""

import logging

from adapters.db.sqlite_adapter import SQLiteAdapter, rows_to_dicts
from core.ledger.types import TradeRecord

logger = logging.getLogger(__name__)


class TradeStore:
    """거래 기록 저장소

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def append(self, record: TradeRecord) -> TradeRecord:
        """거래 기록 추가

        Returns:
            id가 채워진 TradeRecord
        """
        cursor = await self.db.execute(
            """
            INSERT INTO trades (username, symbol, side, amount, profit, result)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                record.username,
                record.symbol,
                record.side,
                record.amount,
                record.profit,
                record.result,
            ),
        )
        record.id = cursor.lastrowid
        return record

    async def list(self, username: str | None = None) -> list[TradeRecord]:
        """거래 기록 목록 (최신순)"""
        if username is None:
            cursor = await self.db.execute(
                "SELECT * FROM trades ORDER BY created_at DESC, id DESC"
            )
        else:
            cursor = await self.db.execute(
                "SELECT * FROM trades WHERE username = ? ORDER BY created_at DESC, id DESC",
                (username,),
            )
        rows = await cursor.fetchall()
        return [TradeRecord.from_row(r) for r in rows_to_dicts(cursor, rows)]

    async def count(self, username: str | None = None) -> int:
        """거래 기록 수"""
        if username is None:
            row = await self.db.fetchone("SELECT COUNT(*) FROM trades")
        else:
            row = await self.db.fetchone(
                "SELECT COUNT(*) FROM trades WHERE username = ?",
                (username,),
            )
        return int(row[0]) if row else 0
