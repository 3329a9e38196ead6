"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액 범위/통화 검증은 도메인 계층(LedgerEngine)에서 수행하므로
여기서는 형식만 검사.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class DepositCreateRequest(BaseModel):
    """입금 요청"""

    currency: str | None = Field(default=None, description="통화 (예: USDT)")
    network: str | None = Field(default=None, description="네트워크 (예: TRC20)")
    amount: float | None = Field(default=None, description="입금 금액")
    proof: str | None = Field(
        default=None,
        validation_alias=AliasChoices("proof", "proof_image"),
        description="입금 증빙 (업로드된 파일 참조)",
    )


class WithdrawCreateRequest(BaseModel):
    """출금 요청"""

    currency: str | None = Field(default=None, description="통화")
    network: str | None = Field(default=None, description="네트워크")
    amount: float | None = Field(default=None, description="출금 금액")
    address: str | None = Field(default=None, description="출금 주소")


class ConvertRequest(BaseModel):
    """환전 요청"""

    model_config = ConfigDict(populate_by_name=True)

    from_currency: str | None = Field(default=None, alias="fromCurrency")
    to_currency: str | None = Field(default=None, alias="toCurrency")
    amount: float | None = None


class TradeRequest(BaseModel):
    """거래 요청

    duration은 초 단위 (기존 클라이언트는 seconds 키 사용).
    duration/percent는 형식 검사 없이 정산 엔진에 전달
    (숫자가 아닌 percent는 0, 일치하는 등급이 없는 duration은 무시).
    """

    symbol: str | None = None
    side: str | None = None
    amount: float | None = None
    duration: Any = Field(
        default=None,
        validation_alias=AliasChoices("duration", "seconds"),
    )
    percent: Any = None


class StatusUpdateRequest(BaseModel):
    """입출금 요청 상태 변경 (approved / rejected)"""

    status: str | None = None


# =========================================================================
# 관리자
# =========================================================================


class WinSideRequest(BaseModel):
    """승리 방향 설정"""

    side: str | None = None


class AdminBalanceRequest(BaseModel):
    """잔고 조정 (부호 있는 금액)"""

    username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("username", "user"),
    )
    amount: float | None = Field(
        default=None,
        validation_alias=AliasChoices("amount", "balance"),
    )
    currency: str | None = None


class AddCoinBalanceRequest(BaseModel):
    """통화별 잔고 조정"""

    username: str | None = None
    currency: str | None = None
    amount: float | None = None


class UserCreateRequest(BaseModel):
    """사용자 생성"""

    username: str | None = None
    balance: float = 0.0


class UserStatusRequest(BaseModel):
    """계정 동결/해제"""

    username: str | None = None
    status: str | None = None


class TradeSettingsRequest(BaseModel):
    """사용자 거래 설정"""

    username: str | None = None
    min_trade_amount: float | None = None
    trade_settings: list[dict[str, Any]] | None = None


class SettlementPolicyRequest(BaseModel):
    """정산 정책 변경 (지정한 필드만 변경)"""

    value: dict[str, Any] = Field(
        ...,
        description="변경할 필드 (allow_negative_balance, enforce_frozen)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [{"value": {"allow_negative_balance": False}}]
        }
    }
