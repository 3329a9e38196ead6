"""
UserStore / DepositStore / WithdrawalStore / TradeStore 테스트
"""

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.types import TradeRecord, TradeTier
from core.storage.request_store import DepositStore, WithdrawalStore
from core.storage.trade_store import TradeStore
from core.storage.user_store import UserStore
from core.types import AccountStatus, RequestStatus


class TestUserStore:
    """UserStore 테스트"""

    @pytest.mark.asyncio
    async def test_create_and_get(self, db: SQLiteAdapter) -> None:
        store = UserStore(db)

        user = await store.create("alice", 12.5)

        assert user.username == "alice"
        assert user.balance == 12.5
        assert user.status == AccountStatus.ACTIVE
        assert user.min_trade_amount == 10.0
        assert await store.get("ghost") is None

    @pytest.mark.asyncio
    async def test_set_status(self, db: SQLiteAdapter) -> None:
        store = UserStore(db)
        await store.create("alice")

        assert await store.set_status("alice", AccountStatus.FROZEN) is True
        assert await store.set_status("ghost", AccountStatus.FROZEN) is False
        assert await store.count(AccountStatus.FROZEN) == 1

    @pytest.mark.asyncio
    async def test_update_trade_settings(self, db: SQLiteAdapter) -> None:
        store = UserStore(db)
        await store.create("alice")

        await store.update_trade_settings("alice", 20, [TradeTier(30, 15)])

        user = await store.get("alice")
        assert user.min_trade_amount == 20.0
        assert user.trade_tiers == [TradeTier(30, 15)]

    @pytest.mark.asyncio
    async def test_list_in_signup_order(self, db: SQLiteAdapter) -> None:
        store = UserStore(db)
        await store.create("bob")
        await store.create("alice")

        assert [u.username for u in await store.list_all()] == ["bob", "alice"]
        assert await store.count() == 2


class TestRequestStores:
    """입출금 요청 저장소 테스트"""

    @pytest.mark.asyncio
    async def test_mark_only_from_pending(self, db: SQLiteAdapter) -> None:
        store = DepositStore(db)
        deposit = await store.create("alice", "USDT", "TRC20", 10)

        assert await store.mark(deposit.id, RequestStatus.APPROVED) is True
        assert await store.mark(deposit.id, RequestStatus.REJECTED) is False
        assert (await store.get(deposit.id)).status == RequestStatus.APPROVED

    @pytest.mark.asyncio
    async def test_list_newest_first(self, db: SQLiteAdapter) -> None:
        store = WithdrawalStore(db)
        first = await store.create("alice", "USDT", "TRC20", 1, "T1")
        second = await store.create("alice", "USDT", "TRC20", 2, "T2")
        await store.create("bob", "USDT", "TRC20", 3, "T3")

        mine = await store.list("alice")

        assert [w.id for w in mine] == [second.id, first.id]
        assert len(await store.list()) == 3

    @pytest.mark.asyncio
    async def test_approved_total(self, db: SQLiteAdapter) -> None:
        store = DepositStore(db)
        a = await store.create("alice", "USDT", "TRC20", 10)
        b = await store.create("alice", "BTC", "BTC", 0.5)
        await store.create("alice", "USDT", "TRC20", 99)
        c = await store.create("bob", "USDT", "TRC20", 7)
        for request in (a, b, c):
            await store.mark(request.id, RequestStatus.APPROVED)

        assert await store.approved_total("alice") == 10.5
        assert await store.approved_total() == 17.5
        assert await store.approved_total(day="2000-01-01") == 0.0


class TestTradeStore:
    """TradeStore 테스트"""

    @pytest.mark.asyncio
    async def test_append_sets_id(self, db: SQLiteAdapter) -> None:
        store = TradeStore(db)

        record = await store.append(
            TradeRecord(
                username="alice",
                symbol="BTCUSDT",
                side="long",
                amount=10,
                profit=2,
                result="win",
            )
        )

        assert record.id is not None
        listed = await store.list("alice")
        assert listed[0].symbol == "BTCUSDT"
        assert listed[0].created_at is not None
        assert await store.count() == 1
