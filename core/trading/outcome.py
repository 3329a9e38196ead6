"""
승리 방향 (Outcome Parameter)

프로세스 전역 값. 관리자만 변경하며 정산은 시작 시점의 스냅샷을 사용.
"""

import asyncio
import logging

from core.constants import Defaults
from core.errors import InvalidInput
from core.types import WIN_SIDES

logger = logging.getLogger(__name__)


def validate_side(side: object) -> str:
    """long/short 검증 (대소문자 무시)

    Raises:
        InvalidInput: long/short가 아닌 경우
    """
    if not isinstance(side, str) or side.strip().lower() not in WIN_SIDES:
        raise InvalidInput("Invalid side")
    return side.strip().lower()


class OutcomeCell:
    """승리 방향 저장 셀 (마지막 쓰기 우선)

    Args:
        initial: 초기 방향 (long/short)
    """

    def __init__(self, initial: str = Defaults.WIN_SIDE):
        self._side = validate_side(initial)
        self._lock = asyncio.Lock()

    @property
    def value(self) -> str:
        """현재 값 (동기 조회)"""
        return self._side

    async def snapshot(self) -> str:
        """정산용 스냅샷"""
        async with self._lock:
            return self._side

    async def set(self, side: str) -> str:
        """승리 방향 변경

        Returns:
            정규화된 방향
        """
        side = validate_side(side)
        async with self._lock:
            previous, self._side = self._side, side
        logger.info(f"Win side changed: {previous} -> {side}")
        return side
