"""
LedgerEngine 테스트

차감/입금/조정/정산 반영 및 레거시 잔고와 미러 항목의 동기화 규칙.
"""

import math

import pytest

from core.errors import InsufficientFunds, InvalidInput, UserNotFound
from core.ledger.engine import LedgerEngine, normalize_currency, parse_amount


class TestParseAmount:
    """parse_amount 테스트"""

    def test_numeric_string(self) -> None:
        assert parse_amount("12.5") == 12.5

    @pytest.mark.parametrize("value", [0, -1, "abc", None, True, math.inf, math.nan])
    def test_invalid(self, value: object) -> None:
        """0 이하 / 숫자 아님 / 비유한 값 거절"""
        with pytest.raises(InvalidInput):
            parse_amount(value)

    def test_zero_allowed(self) -> None:
        assert parse_amount(0, allow_zero=True) == 0.0


class TestNormalizeCurrency:
    """normalize_currency 테스트"""

    def test_upper_and_strip(self) -> None:
        assert normalize_currency(" btc ") == "BTC"

    @pytest.mark.parametrize("value", ["", "   ", None, 5])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(InvalidInput):
            normalize_currency(value)


class TestDebit:
    """debit() 테스트"""

    @pytest.mark.asyncio
    async def test_primary_debit_syncs_mirror(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        """기본 통화 차감: 레거시와 미러 모두 차감"""
        await make_user("alice", balance=100, mirror=100)

        remaining = await ledger.debit("alice", "USDT", 40)

        assert remaining == 60
        assert await read_balances("alice") == (60.0, {"USDT": 60.0})

    @pytest.mark.asyncio
    async def test_primary_debit_without_mirror(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        """미러 항목이 없으면 레거시만 차감 (미러 생성 안 함)"""
        await make_user("alice", balance=100)

        await ledger.debit("alice", "USDT", 30)

        assert await read_balances("alice") == (70.0, {})

    @pytest.mark.asyncio
    async def test_primary_debit_with_short_mirror(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        """미러 잔고가 부족하면 미러는 그대로 (불일치 허용)"""
        await make_user("alice", balance=100, mirror=10)

        await ledger.debit("alice", "USDT", 50)

        assert await read_balances("alice") == (50.0, {"USDT": 10.0})

    @pytest.mark.asyncio
    async def test_insufficient_primary(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        """기본 통화 잔고 부족 시 변경 없음"""
        await make_user("alice", balance=10, mirror=10)

        with pytest.raises(InsufficientFunds) as exc_info:
            await ledger.debit("alice", "USDT", 10.01)

        assert exc_info.value.message == "Insufficient USDT balance"
        assert await read_balances("alice") == (10.0, {"USDT": 10.0})

    @pytest.mark.asyncio
    async def test_availability_uses_legacy_not_mirror(
        self, ledger: LedgerEngine, make_user
    ) -> None:
        """기본 통화 가용 잔고는 레거시 기준 (미러가 더 커도 무시)"""
        await make_user("alice", balance=5, mirror=500)

        with pytest.raises(InsufficientFunds):
            await ledger.debit("alice", "USDT", 50)

    @pytest.mark.asyncio
    async def test_coin_debit(self, ledger: LedgerEngine, make_user, read_balances) -> None:
        """기타 통화 차감"""
        await make_user("alice", coins={"BTC": 1.5})

        await ledger.debit("alice", "btc", 0.5)

        assert await read_balances("alice") == (0.0, {"BTC": 1.0})

    @pytest.mark.asyncio
    async def test_absent_coin_is_zero(self, ledger: LedgerEngine, make_user) -> None:
        """항목 없는 통화는 잔고 0"""
        await make_user("alice", balance=1000)

        with pytest.raises(InsufficientFunds):
            await ledger.debit("alice", "ETH", 0.1)

    @pytest.mark.asyncio
    async def test_invalid_amount(self, ledger: LedgerEngine, make_user) -> None:
        await make_user("alice", balance=100)

        with pytest.raises(InvalidInput):
            await ledger.debit("alice", "USDT", -5)


class TestCredit:
    """credit() / refund() 테스트"""

    @pytest.mark.asyncio
    async def test_primary_credit_creates_mirror(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        """기본 통화 입금: 레거시 증가 + 미러 upsert"""
        await make_user("alice", balance=50)

        await ledger.credit("alice", "USDT", 25)

        assert await read_balances("alice") == (75.0, {"USDT": 25.0})

    @pytest.mark.asyncio
    async def test_primary_credit_existing_mirror(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        await make_user("alice", balance=50, mirror=50)

        await ledger.credit("alice", "USDT", 25)

        assert await read_balances("alice") == (75.0, {"USDT": 75.0})

    @pytest.mark.asyncio
    async def test_coin_credit_leaves_legacy(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        """기타 통화 입금은 레거시 잔고 불변"""
        await make_user("alice", balance=50)

        await ledger.credit("alice", "BTC", 0.25)
        await ledger.credit("alice", "BTC", 0.25)

        assert await read_balances("alice") == (50.0, {"BTC": 0.5})

    @pytest.mark.asyncio
    async def test_credit_unknown_user(self, ledger: LedgerEngine) -> None:
        with pytest.raises(UserNotFound):
            await ledger.credit("ghost", "USDT", 1)

    @pytest.mark.asyncio
    async def test_refund_equals_credit(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        await make_user("alice", balance=0, coins={"ETH": 1})

        await ledger.refund("alice", "ETH", 2)

        assert await read_balances("alice") == (0.0, {"ETH": 3.0})


class TestAdjust:
    """adjust() 테스트 (관리자, 잔고 확인 없음)"""

    @pytest.mark.asyncio
    async def test_negative_adjust_allows_negative(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        """관리자 조정은 잔고를 음수로 만들 수 있음"""
        await make_user("alice", balance=10, mirror=10)

        await ledger.adjust("alice", "USDT", -25)

        legacy, entries = await read_balances("alice")
        assert legacy == -15.0
        assert entries == {"USDT": 10.0}

    @pytest.mark.asyncio
    async def test_positive_adjust_primary(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        await make_user("alice", balance=10)

        await ledger.adjust("alice", "usdt", "25")

        assert await read_balances("alice") == (35.0, {"USDT": 25.0})

    @pytest.mark.asyncio
    async def test_adjust_unknown_user(self, ledger: LedgerEngine) -> None:
        with pytest.raises(UserNotFound):
            await ledger.adjust("ghost", "USDT", 10)

    @pytest.mark.asyncio
    async def test_adjust_non_numeric(self, ledger: LedgerEngine, make_user) -> None:
        await make_user("alice")

        with pytest.raises(InvalidInput):
            await ledger.adjust("alice", "USDT", "lots")


class TestApplySettlement:
    """apply_settlement() 테스트"""

    @pytest.mark.asyncio
    async def test_profit(self, ledger: LedgerEngine, make_user, read_balances) -> None:
        await make_user("alice", balance=100, mirror=100)

        await ledger.apply_settlement("alice", 50)

        assert await read_balances("alice") == (150.0, {"USDT": 150.0})

    @pytest.mark.asyncio
    async def test_loss_may_go_negative(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        """음수 허용 시 손실이 잔고보다 커도 반영"""
        await make_user("alice", balance=30, mirror=30)

        await ledger.apply_settlement("alice", -100, allow_negative=True)

        assert await read_balances("alice") == (-70.0, {"USDT": 30.0})

    @pytest.mark.asyncio
    async def test_loss_checked_when_negative_disallowed(
        self, ledger: LedgerEngine, make_user, read_balances
    ) -> None:
        """음수 불허 시 잔고 부족이면 실패, 변경 없음"""
        await make_user("alice", balance=30, mirror=30)

        with pytest.raises(InsufficientFunds):
            await ledger.apply_settlement("alice", -100, allow_negative=False)

        assert await read_balances("alice") == (30.0, {"USDT": 30.0})


class TestQueries:
    """available() / balances() 테스트"""

    @pytest.mark.asyncio
    async def test_available(self, ledger: LedgerEngine, make_user) -> None:
        await make_user("alice", balance=12, coins={"BTC": 0.1})

        assert await ledger.available("alice", "USDT") == 12.0
        assert await ledger.available("alice", "BTC") == 0.1
        assert await ledger.available("alice", "SOL") == 0.0

    @pytest.mark.asyncio
    async def test_balances_sorted(self, ledger: LedgerEngine, make_user) -> None:
        await make_user("alice", mirror=5, coins={"BTC": 1, "ETH": 2})

        entries = await ledger.balances("alice")

        assert [e.currency for e in entries] == ["BTC", "ETH", "USDT"]
