"""
스토리지 모듈

사용자, 입출금 요청, 거래 기록, 런타임 설정 저장소 제공.
잔고 컬럼은 core.ledger에서만 변경.
"""

from core.storage.config_store import ConfigStore, init_default_configs
from core.storage.request_store import DepositStore, WithdrawalStore
from core.storage.trade_store import TradeStore
from core.storage.user_store import UserStore

__all__ = [
    "ConfigStore",
    "init_default_configs",
    "DepositStore",
    "WithdrawalStore",
    "TradeStore",
    "UserStore",
]
