"""
거래/정산 테스트 fixture

시세 조회기는 AsyncMock으로 고정 시세 반환.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.market.price_oracle import PriceOracle
from core.ledger.engine import LedgerEngine
from core.storage.config_store import ConfigStore
from core.trading.admin import AdminControl
from core.trading.conversion import ConversionService
from core.trading.outcome import OutcomeCell
from core.trading.settlement import SettlementEngine
from core.trading.wallet import WalletService

TEST_PRICES = {"BTC": 50000.0, "ETH": 2500.0, "USDT": 1.0}


@pytest.fixture
def oracle() -> MagicMock:
    mock = MagicMock(spec=PriceOracle)
    mock.get_prices = AsyncMock(side_effect=lambda: dict(TEST_PRICES))
    return mock


@pytest.fixture
def outcome() -> OutcomeCell:
    return OutcomeCell("long")


@pytest.fixture
def conversion(
    db: SQLiteAdapter,
    ledger: LedgerEngine,
    oracle: MagicMock,
    config_store: ConfigStore,
) -> ConversionService:
    return ConversionService(db, ledger, oracle, config_store)


@pytest.fixture
def settlement(
    db: SQLiteAdapter,
    ledger: LedgerEngine,
    outcome: OutcomeCell,
    config_store: ConfigStore,
) -> SettlementEngine:
    return SettlementEngine(db, ledger, outcome, config_store)


@pytest.fixture
def wallet(db: SQLiteAdapter, ledger: LedgerEngine) -> WalletService:
    return WalletService(db, ledger)


@pytest.fixture
def admin(
    db: SQLiteAdapter,
    ledger: LedgerEngine,
    outcome: OutcomeCell,
    config_store: ConfigStore,
) -> AdminControl:
    return AdminControl(db, ledger, outcome, config_store)
