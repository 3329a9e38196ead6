"""
시세 어댑터

외부 시세 API 조회 및 고정 시세 폴백.
"""

from adapters.market.price_oracle import PriceOracle, parse_ticker_prices

__all__ = [
    "PriceOracle",
    "parse_ticker_prices",
]
