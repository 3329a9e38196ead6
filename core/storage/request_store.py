"""
Request Store

입금(deposits) / 출금(withdrawals) 요청 저장소.
잔고 변경은 하지 않음 (LedgerEngine 담당).
"""

import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter, rows_to_dicts
from core.ledger.types import DepositRequest, WithdrawalRequest
from core.types import RequestStatus

logger = logging.getLogger(__name__)


class DepositStore:
    """입금 요청 저장소

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def create(
        self,
        username: str,
        currency: str,
        network: str,
        amount: float,
        proof_image: str | None = None,
    ) -> DepositRequest:
        """입금 요청 생성 (pending)"""
        cursor = await self.db.execute(
            """
            INSERT INTO deposits (username, currency, network, amount, proof_image, status)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (username, currency, network, amount, proof_image, RequestStatus.PENDING.value),
        )
        deposit_id = cursor.lastrowid
        logger.info(f"Deposit request created: #{deposit_id} {username} {amount} {currency}")
        return await self.get(deposit_id)  # type: ignore

    async def get(self, deposit_id: int) -> DepositRequest | None:
        """입금 요청 조회"""
        cursor = await self.db.execute(
            "SELECT * FROM deposits WHERE id = ?",
            (deposit_id,),
        )
        row = await cursor.fetchone()
        if not row:
            return None
        return DepositRequest.from_row(rows_to_dicts(cursor, [row])[0])

    async def list(self, username: str | None = None) -> list[DepositRequest]:
        """입금 요청 목록 (최신순, username 지정 시 해당 사용자만)"""
        if username is None:
            cursor = await self.db.execute(
                "SELECT * FROM deposits ORDER BY created_at DESC, id DESC"
            )
        else:
            cursor = await self.db.execute(
                "SELECT * FROM deposits WHERE username = ? ORDER BY created_at DESC, id DESC",
                (username,),
            )
        rows = await cursor.fetchall()
        return [DepositRequest.from_row(r) for r in rows_to_dicts(cursor, rows)]

    async def mark(self, deposit_id: int, status: RequestStatus) -> bool:
        """pending 상태인 요청만 상태 변경

        Returns:
            변경 여부 (이미 처리된 요청이면 False)
        """
        cursor = await self.db.execute(
            "UPDATE deposits SET status = ? WHERE id = ? AND status = ?",
            (status.value, deposit_id, RequestStatus.PENDING.value),
        )
        return cursor.rowcount > 0

    async def approved_total(
        self,
        username: str | None = None,
        day: str | None = None,
    ) -> float:
        """승인된 입금 합계 (통화 구분 없음)"""
        return await _approved_total(self.db, "deposits", username, day)


class WithdrawalStore:
    """출금 요청 저장소

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def create(
        self,
        username: str,
        currency: str,
        network: str,
        amount: float,
        address: str,
    ) -> WithdrawalRequest:
        """출금 요청 생성 (pending, 잔고는 호출자가 이미 차감)"""
        cursor = await self.db.execute(
            """
            INSERT INTO withdrawals (username, currency, network, amount, address, status)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (username, currency, network, amount, address, RequestStatus.PENDING.value),
        )
        withdrawal_id = cursor.lastrowid
        logger.info(
            f"Withdrawal request created: #{withdrawal_id} {username} {amount} {currency}"
        )
        return await self.get(withdrawal_id)  # type: ignore

    async def get(self, withdrawal_id: int) -> WithdrawalRequest | None:
        """출금 요청 조회"""
        cursor = await self.db.execute(
            "SELECT * FROM withdrawals WHERE id = ?",
            (withdrawal_id,),
        )
        row = await cursor.fetchone()
        if not row:
            return None
        return WithdrawalRequest.from_row(rows_to_dicts(cursor, [row])[0])

    async def list(self, username: str | None = None) -> list[WithdrawalRequest]:
        """출금 요청 목록 (최신순)"""
        if username is None:
            cursor = await self.db.execute(
                "SELECT * FROM withdrawals ORDER BY created_at DESC, id DESC"
            )
        else:
            cursor = await self.db.execute(
                "SELECT * FROM withdrawals WHERE username = ? ORDER BY created_at DESC, id DESC",
                (username,),
            )
        rows = await cursor.fetchall()
        return [WithdrawalRequest.from_row(r) for r in rows_to_dicts(cursor, rows)]

    async def mark(self, withdrawal_id: int, status: RequestStatus) -> bool:
        """pending 상태인 요청만 상태 변경"""
        cursor = await self.db.execute(
            "UPDATE withdrawals SET status = ? WHERE id = ? AND status = ?",
            (status.value, withdrawal_id, RequestStatus.PENDING.value),
        )
        return cursor.rowcount > 0

    async def approved_total(
        self,
        username: str | None = None,
        day: str | None = None,
    ) -> float:
        """승인된 출금 합계 (통화 구분 없음)"""
        return await _approved_total(self.db, "withdrawals", username, day)


async def _approved_total(
    db: SQLiteAdapter,
    table: str,
    username: str | None,
    day: str | None,
) -> float:
    conditions = ["status = ?"]
    params: list[Any] = [RequestStatus.APPROVED.value]

    if username is not None:
        conditions.append("username = ?")
        params.append(username)
    if day is not None:
        conditions.append("date(created_at) = ?")
        params.append(day)

    row = await db.fetchone(
        f"SELECT COALESCE(SUM(amount), 0) FROM {table} WHERE {' AND '.join(conditions)}",
        tuple(params),
    )
    return float(row[0]) if row else 0.0
