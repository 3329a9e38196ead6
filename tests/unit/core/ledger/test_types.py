"""
원장 타입 테스트

TradeTier, trade_settings 파싱, User.from_row.
"""

import pytest

from core.ledger.types import TradeTier, User, parse_trade_tiers
from core.types import AccountStatus


class TestTradeTier:
    """TradeTier 테스트"""

    def test_matches_numeric(self) -> None:
        """숫자 비교 ("30" == 30)"""
        tier = TradeTier(duration=30, percent=20)

        assert tier.matches(30)
        assert tier.matches("30")
        assert tier.matches(30.0)
        assert not tier.matches(60)
        assert not tier.matches("abc")

    def test_from_dict_seconds_key(self) -> None:
        """기존 데이터 seconds 키 허용"""
        tier = TradeTier.from_dict({"seconds": 60, "percent": "35"})

        assert tier == TradeTier(duration=60.0, percent=35.0)

    def test_to_dict(self) -> None:
        assert TradeTier(30, 20).to_dict() == {"seconds": 30, "percent": 20}


class TestParseTradeTiers:
    """parse_trade_tiers 테스트"""

    def test_json_string(self) -> None:
        tiers = parse_trade_tiers('[{"seconds": 30, "percent": 20}, {"seconds": 60, "percent": 40}]')

        assert [t.duration for t in tiers] == [30.0, 60.0]

    @pytest.mark.parametrize("raw", [None, "", "not json", '{"a": 1}'])
    def test_invalid_returns_empty(self, raw: object) -> None:
        assert parse_trade_tiers(raw) == []

    def test_bad_items_skipped(self) -> None:
        tiers = parse_trade_tiers([{"seconds": 30, "percent": 20}, {"percent": 5}, "x"])

        assert tiers == [TradeTier(30.0, 20.0)]


class TestUser:
    """User 테스트"""

    def test_from_row_defaults(self) -> None:
        """min_trade_amount 미설정 시 10"""
        user = User.from_row({
            "id": 1,
            "username": "alice",
            "balance": 12.5,
            "status": "frozen",
            "min_trade_amount": None,
            "trade_settings": None,
        })

        assert user.status == AccountStatus.FROZEN
        assert user.is_frozen
        assert user.min_trade_amount == 10.0
        assert user.trade_tiers == []

    def test_find_tier_first_match(self) -> None:
        """여러 등급이 일치하면 첫 번째"""
        user = User(
            username="alice",
            trade_tiers=[TradeTier(30, 20), TradeTier(30, 99)],
        )

        assert user.find_tier(30).percent == 20
        assert user.find_tier(45) is None

    def test_to_dict_has_no_password(self) -> None:
        data = User(username="alice").to_dict()

        assert "password" not in data
        assert data["status"] == "active"
