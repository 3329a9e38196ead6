"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class AccountStatus(str, Enum):
    """계정 상태"""

    ACTIVE = "active"
    FROZEN = "frozen"


class RequestStatus(str, Enum):
    """입금/출금 요청 상태

    전이 규칙:
    - pending → approved: 관리자 승인
    - pending → rejected: 관리자 거절
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TradeSide(str, Enum):
    """거래 방향"""

    LONG = "long"
    SHORT = "short"
    CONVERT = "convert"  # 환전 기록용


class TradeResult(str, Enum):
    """거래 결과"""

    WIN = "win"
    LOSE = "lose"


# 승패 판정에 사용 가능한 방향 (환전 제외)
WIN_SIDES: tuple[str, ...] = (TradeSide.LONG.value, TradeSide.SHORT.value)
