"""
시세 조회 (Price Oracle)

Binance Spot 전체 티커(/api/v3/ticker/price)에서 USDT 기준 시세를 조회.
조회 실패 시 고정 시세표(FALLBACK_PRICES)를 반환하며 예외를 던지지 않음.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any

import httpx

from core.constants import FALLBACK_PRICES, Defaults, PriceEndpoints

logger = logging.getLogger(__name__)


def parse_ticker_prices(payload: Any) -> dict[str, float]:
    """티커 응답을 {통화: 시세}로 변환

    *USDT 심볼만 사용하며 접미사를 제거. USDT는 항상 1.

    Args:
        payload: [{"symbol": "BTCUSDT", "price": "95000.00"}, ...]

    Returns:
        시세 딕셔너리 (유효한 항목이 없으면 빈 딕셔너리)
    """
    if not isinstance(payload, list):
        return {}

    suffix = PriceEndpoints.QUOTE_SUFFIX
    prices: dict[str, float] = {}

    for item in payload:
        if not isinstance(item, dict):
            continue
        symbol = item.get("symbol")
        if not isinstance(symbol, str) or not symbol.endswith(suffix):
            continue

        currency = symbol[: -len(suffix)]
        if not currency:
            continue

        try:
            price = float(item.get("price"))
        except (TypeError, ValueError):
            continue
        if not math.isfinite(price) or price <= 0:
            continue

        prices[currency] = price

    if not prices:
        return {}

    prices[suffix] = 1.0
    return prices


class PriceOracle:
    """시세 조회기

    Args:
        url: 티커 API URL
        timeout: 요청 타임아웃 (초)
        cache_ttl_seconds: 성공 응답 캐시 시간 (0이면 캐시 안 함)

    사용 예시:
    ```python
    oracle = PriceOracle()
    prices = await oracle.get_prices()
    btc = prices.get("BTC")
    await oracle.close()
    ```
    """

    def __init__(
        self,
        url: str = PriceEndpoints.TICKER_PRICE_URL,
        timeout: float = Defaults.PRICE_TIMEOUT_SEC,
        cache_ttl_seconds: float = Defaults.PRICE_CACHE_TTL_SEC,
    ):
        self.url = url
        self.timeout = timeout
        self.cache_ttl_seconds = cache_ttl_seconds

        self._client: httpx.AsyncClient | None = None
        self._cache: tuple[float, dict[str, float]] | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 가져오기 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def get_prices(self) -> dict[str, float]:
        """현재 시세 조회

        Returns:
            {통화: USDT 시세}. 실패 시 고정 시세표 복사본.
        """
        cached = self._get_from_cache()
        if cached is not None:
            return cached

        try:
            client = await self._get_client()
            response = await client.get(self.url)
            response.raise_for_status()
            prices = parse_ticker_prices(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"시세 조회 실패, 고정 시세 사용: {e}")
            return dict(FALLBACK_PRICES)

        if not prices:
            logger.warning("시세 응답에 유효한 USDT 심볼 없음, 고정 시세 사용")
            return dict(FALLBACK_PRICES)

        self._set_cache(prices)
        return dict(prices)

    def _get_from_cache(self) -> dict[str, float] | None:
        """캐시에서 시세 조회"""
        if self._cache is None or self.cache_ttl_seconds <= 0:
            return None

        timestamp, prices = self._cache
        now = datetime.now(timezone.utc).timestamp()
        if now - timestamp > self.cache_ttl_seconds:
            self._cache = None
            return None
        return dict(prices)

    def _set_cache(self, prices: dict[str, float]) -> None:
        if self.cache_ttl_seconds <= 0:
            return
        now = datetime.now(timezone.utc).timestamp()
        self._cache = (now, dict(prices))

    def clear_cache(self) -> None:
        """캐시 초기화"""
        self._cache = None
