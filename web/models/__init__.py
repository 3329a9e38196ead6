"""
Web API 스키마
"""

from web.models.requests import (
    AddCoinBalanceRequest,
    AdminBalanceRequest,
    ConvertRequest,
    DepositCreateRequest,
    SettlementPolicyRequest,
    StatusUpdateRequest,
    TradeRequest,
    TradeSettingsRequest,
    UserCreateRequest,
    UserStatusRequest,
    WinSideRequest,
    WithdrawCreateRequest,
)

__all__ = [
    "AddCoinBalanceRequest",
    "AdminBalanceRequest",
    "ConvertRequest",
    "DepositCreateRequest",
    "SettlementPolicyRequest",
    "StatusUpdateRequest",
    "TradeRequest",
    "TradeSettingsRequest",
    "UserCreateRequest",
    "UserStatusRequest",
    "WinSideRequest",
    "WithdrawCreateRequest",
]
