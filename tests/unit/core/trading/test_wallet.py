"""
WalletService 테스트

입금 요청 생성, 출금 에스크로, 사용자 조회.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from core.errors import AccountFrozen, InsufficientFunds, InvalidInput, UserNotFound
from core.trading.wallet import WalletService
from core.types import RequestStatus


class TestSubmitDeposit:
    """submit_deposit() 테스트"""

    @pytest.mark.asyncio
    async def test_creates_pending_without_balance_change(
        self, wallet: WalletService, make_user, read_balances
    ) -> None:
        await make_user("alice", balance=5)

        deposit = await wallet.submit_deposit("alice", "usdt", "TRC20", 100, "proof.png")

        assert deposit.id is not None
        assert deposit.status == RequestStatus.PENDING
        assert deposit.currency == "USDT"
        assert deposit.proof_image == "proof.png"
        assert await read_balances("alice") == (5.0, {})

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "currency,network,amount",
        [(None, "TRC20", 1), ("USDT", None, 1), ("USDT", "TRC20", None), ("USDT", " ", 1), ("USDT", "TRC20", 0)],
    )
    async def test_invalid_fields(
        self, wallet: WalletService, make_user, currency, network, amount
    ) -> None:
        await make_user("alice")

        with pytest.raises(InvalidInput):
            await wallet.submit_deposit("alice", currency, network, amount)

    @pytest.mark.asyncio
    async def test_frozen(self, wallet: WalletService, make_user) -> None:
        await make_user("alice", status="frozen")

        with pytest.raises(AccountFrozen):
            await wallet.submit_deposit("alice", "USDT", "TRC20", 10)

    @pytest.mark.asyncio
    async def test_unknown_user(self, wallet: WalletService) -> None:
        with pytest.raises(UserNotFound):
            await wallet.submit_deposit("ghost", "USDT", "TRC20", 10)


class TestSubmitWithdrawal:
    """submit_withdrawal() 테스트 (즉시 차감)"""

    @pytest.mark.asyncio
    async def test_escrow_debit(
        self, wallet: WalletService, make_user, read_balances
    ) -> None:
        await make_user("alice", balance=100, mirror=100)

        withdrawal = await wallet.submit_withdrawal("alice", "USDT", "TRC20", 40, "TXaddr")

        assert withdrawal.status == RequestStatus.PENDING
        assert withdrawal.address == "TXaddr"
        assert await read_balances("alice") == (60.0, {"USDT": 60.0})

    @pytest.mark.asyncio
    async def test_insufficient_creates_nothing(
        self, wallet: WalletService, make_user, read_balances
    ) -> None:
        await make_user("alice", coins={"BTC": 0.1})

        with pytest.raises(InsufficientFunds):
            await wallet.submit_withdrawal("alice", "BTC", "BTC", 0.2, "bc1q")

        assert await read_balances("alice") == (0.0, {"BTC": 0.1})
        assert await wallet.withdrawal_history("alice") == []

    @pytest.mark.asyncio
    async def test_debit_rolled_back_when_insert_fails(
        self, wallet: WalletService, make_user, read_balances
    ) -> None:
        """요청 생성 실패 시 차감도 롤백"""
        await make_user("alice", balance=100)

        with patch.object(
            wallet.withdrawals, "create", AsyncMock(side_effect=RuntimeError("boom"))
        ):
            with pytest.raises(RuntimeError):
                await wallet.submit_withdrawal("alice", "USDT", "TRC20", 40, "TXaddr")

        assert (await read_balances("alice"))[0] == 100.0

    @pytest.mark.asyncio
    async def test_concurrent_withdrawals_no_double_spend(
        self, wallet: WalletService, make_user, read_balances
    ) -> None:
        """잔고 100에 동시 출금 60 × 2: 하나만 성공"""
        await make_user("alice", balance=100, mirror=100)

        results = await asyncio.gather(
            wallet.submit_withdrawal("alice", "USDT", "TRC20", 60, "T1"),
            wallet.submit_withdrawal("alice", "USDT", "TRC20", 60, "T2"),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientFunds)
        assert await read_balances("alice") == (40.0, {"USDT": 40.0})
        assert len(await wallet.withdrawal_history("alice")) == 1

    @pytest.mark.asyncio
    async def test_missing_address(self, wallet: WalletService, make_user) -> None:
        await make_user("alice", balance=100)

        with pytest.raises(InvalidInput):
            await wallet.submit_withdrawal("alice", "USDT", "TRC20", 40, None)

    @pytest.mark.asyncio
    async def test_frozen(self, wallet: WalletService, make_user, read_balances) -> None:
        await make_user("alice", balance=100, status="frozen")

        with pytest.raises(AccountFrozen):
            await wallet.submit_withdrawal("alice", "USDT", "TRC20", 40, "TXaddr")

        assert (await read_balances("alice"))[0] == 100.0


class TestQueries:
    """사용자 조회 테스트"""

    @pytest.mark.asyncio
    async def test_profile(self, wallet: WalletService, make_user) -> None:
        await make_user("alice", balance=10, mirror=10, coins={"BTC": 1})

        profile = await wallet.profile("alice")

        assert profile["username"] == "alice"
        assert profile["balance"] == 10.0
        assert {"currency": "BTC", "amount": 1.0} in profile["balances"]

    @pytest.mark.asyncio
    async def test_trade_settings(self, wallet: WalletService, make_user) -> None:
        await make_user(
            "alice",
            min_trade_amount=25,
            trade_settings='[{"seconds": 30, "percent": 20}]',
        )

        assert await wallet.trade_settings("alice") == {
            "min_trade_amount": 25.0,
            "trade_settings": [{"seconds": 30.0, "percent": 20.0}],
        }

    @pytest.mark.asyncio
    async def test_history_scoped_to_user(self, wallet: WalletService, make_user) -> None:
        await make_user("alice")
        await make_user("bob")
        await wallet.submit_deposit("alice", "USDT", "TRC20", 10)
        await wallet.submit_deposit("bob", "USDT", "TRC20", 20)

        history = await wallet.deposit_history("alice")

        assert [d.amount for d in history] == [10.0]
