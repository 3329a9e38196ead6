"""
원장 타입 정의

사용자, 잔고, 입출금 요청, 거래 기록 등 Ledger에서 사용하는 Dataclass 정의
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any

from core.constants import Defaults
from core.types import AccountStatus, RequestStatus


@dataclass(frozen=True)
class TradeTier:
    """거래 등급 (사용자별)

    거래 요청의 duration(초)과 일치하면 해당 payout 비율 사용.

    Attributes:
        duration: 거래 기간 파라미터 (초)
        percent: 수익 비율 (%)
    """

    duration: float
    percent: float

    def matches(self, duration: Any) -> bool:
        """duration 일치 여부 (숫자 비교, "30" == 30)"""
        try:
            return math.isclose(float(duration), self.duration)
        except (TypeError, ValueError):
            return False

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환 (trade_settings JSON 형식)"""
        return {"seconds": self.duration, "percent": self.percent}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TradeTier":
        """trade_settings 항목에서 생성

        기존 데이터는 seconds 키, 신규 데이터는 duration 키 허용.
        """
        duration = data.get("duration", data.get("seconds"))
        return cls(duration=float(duration), percent=float(data.get("percent", 0)))


def parse_trade_tiers(raw: str | list[Any] | None) -> list[TradeTier]:
    """trade_settings 컬럼(JSON) 파싱

    잘못된 항목은 건너뜀.
    """
    if raw is None or raw == "":
        return []

    try:
        items = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        return []
    if not isinstance(items, list):
        return []

    tiers: list[TradeTier] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            tiers.append(TradeTier.from_dict(item))
        except (TypeError, ValueError):
            continue
    return tiers


@dataclass
class User:
    """사용자

    Attributes:
        username: 사용자 핸들 (고유)
        balance: 레거시 잔고 (기본 통화)
        status: 계정 상태 (active/frozen)
        min_trade_amount: 최소 거래 금액
        trade_tiers: 거래 등급 목록 (순서 유지)
        created_at: 생성 시각
    """

    username: str
    balance: float = 0.0
    status: AccountStatus = AccountStatus.ACTIVE
    min_trade_amount: float = Defaults.MIN_TRADE_AMOUNT
    trade_tiers: list[TradeTier] = field(default_factory=list)
    id: int | None = None
    created_at: str | None = None

    @property
    def is_frozen(self) -> bool:
        return self.status == AccountStatus.FROZEN

    def find_tier(self, duration: Any) -> TradeTier | None:
        """duration에 해당하는 거래 등급 조회 (첫 번째 일치)"""
        for tier in self.trade_tiers:
            if tier.matches(duration):
                return tier
        return None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "User":
        """DB 행에서 생성"""
        min_trade = row.get("min_trade_amount")
        return cls(
            id=row.get("id"),
            username=row["username"],
            balance=float(row.get("balance") or 0),
            status=AccountStatus(row.get("status") or AccountStatus.ACTIVE.value),
            min_trade_amount=(
                float(min_trade) if min_trade else Defaults.MIN_TRADE_AMOUNT
            ),
            trade_tiers=parse_trade_tiers(row.get("trade_settings")),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리 변환 (비밀번호 제외)"""
        return {
            "id": self.id,
            "username": self.username,
            "balance": self.balance,
            "status": self.status.value,
            "min_trade_amount": self.min_trade_amount,
            "trade_settings": [t.to_dict() for t in self.trade_tiers],
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class BalanceEntry:
    """통화별 잔고 항목"""

    currency: str
    amount: float

    def to_dict(self) -> dict[str, Any]:
        return {"currency": self.currency, "amount": self.amount}


@dataclass
class DepositRequest:
    """입금 요청

    상태 전이는 관리자만 가능. 승인 시 입금 통화로 credit.
    """

    id: int
    username: str
    currency: str
    network: str
    amount: float
    proof_image: str | None
    status: RequestStatus
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "DepositRequest":
        return cls(
            id=row["id"],
            username=row["username"],
            currency=row["currency"],
            network=row["network"],
            amount=float(row["amount"]),
            proof_image=row.get("proof_image"),
            status=RequestStatus(row["status"]),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "currency": self.currency,
            "network": self.network,
            "amount": self.amount,
            "proof_image": self.proof_image,
            "status": self.status.value,
            "created_at": self.created_at,
        }


@dataclass
class WithdrawalRequest:
    """출금 요청

    생성 시점에 이미 잔고가 차감됨 (에스크로).
    거절 시 환불, 승인 시 잔고 변화 없음.
    """

    id: int
    username: str
    currency: str
    network: str
    amount: float
    address: str
    status: RequestStatus
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "WithdrawalRequest":
        return cls(
            id=row["id"],
            username=row["username"],
            currency=row["currency"],
            network=row["network"],
            amount=float(row["amount"]),
            address=row["address"],
            status=RequestStatus(row["status"]),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "currency": self.currency,
            "network": self.network,
            "amount": self.amount,
            "address": self.address,
            "status": self.status.value,
            "created_at": self.created_at,
        }


@dataclass
class TradeRecord:
    """거래 기록 (정산 및 환전 감사 로그)"""

    username: str
    symbol: str
    side: str
    amount: float
    profit: float
    result: str
    id: int | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "TradeRecord":
        return cls(
            id=row["id"],
            username=row["username"],
            symbol=row["symbol"],
            side=row["side"],
            amount=float(row["amount"]),
            profit=float(row["profit"]),
            result=row["result"],
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "symbol": self.symbol,
            "side": self.side,
            "amount": self.amount,
            "profit": self.profit,
            "result": self.result,
            "created_at": self.created_at,
        }
