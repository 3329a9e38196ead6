"""
거래/정산 모듈

환전, 거래 정산, 입출금 요청, 관리자 제어.
모든 잔고 변경은 LedgerEngine을 통해 하나의 작업 단위로 처리.
"""

from core.trading.admin import AdminControl
from core.trading.conversion import ConversionResult, ConversionService
from core.trading.outcome import OutcomeCell, validate_side
from core.trading.settlement import SettlementEngine, SettlementResult
from core.trading.wallet import WalletService

__all__ = [
    "AdminControl",
    "ConversionResult",
    "ConversionService",
    "OutcomeCell",
    "validate_side",
    "SettlementEngine",
    "SettlementResult",
    "WalletService",
]
