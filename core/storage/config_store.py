"""
ConfigStore - 런타임 설정 저장소

config_store 테이블을 통해 런타임 설정 관리.
재시작 없이 관리자가 바꿀 수 있는 정책을 저장/조회.

설정 키 구조:
- "settlement": 정산 정책 (allow_negative_balance, enforce_frozen)
- "outcome": 마지막으로 설정된 승리 방향 (win_side)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import InvalidInput, StoreFailure

logger = logging.getLogger(__name__)


# 기본 설정값
DEFAULT_CONFIGS: dict[str, dict[str, Any]] = {
    "settlement": {
        # 손실 정산이 레거시 잔고를 음수로 만들 수 있는지 여부
        "allow_negative_balance": True,
        # 동결 계정의 거래/환전 차단 여부
        "enforce_frozen": True,
    },
    "outcome": {
        # 재시작 시 복원할 승리 방향 (None이면 settings.yaml 값 사용)
        "win_side": None,
    },
}


class ConfigStore:
    """설정 저장소

    config_store 테이블을 읽고 쓰는 클래스.

    Args:
        db: SQLiteAdapter 인스턴스

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        config_store = ConfigStore(db)

        policy = await config_store.get_settlement_policy()
        if not policy["allow_negative_balance"]:
            ...

        await config_store.update_field(
            "settlement", "allow_negative_balance", False, updated_by="admin"
        )
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self._cache: dict[str, dict[str, Any]] = {}

    async def get(self, key: str, use_cache: bool = True) -> dict[str, Any]:
        """설정 조회

        Args:
            key: 설정 키 (settlement, outcome)
            use_cache: 캐시 사용 여부 (기본 True)

        Returns:
            설정 값 (dict). 없으면 기본값 복사본 반환.
        """
        if use_cache and key in self._cache:
            return dict(self._cache[key])

        row = await self.db.fetchone(
            """
            SELECT value_json
            FROM config_store
            WHERE config_key = ?
            """,
            (key,),
        )

        if row:
            try:
                value = json.loads(row[0]) if isinstance(row[0], str) else row[0]
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid config '{key}', using defaults: {e}")
                return dict(DEFAULT_CONFIGS.get(key, {}))

            self._cache[key] = value
            return dict(value)

        return dict(DEFAULT_CONFIGS.get(key, {}))

    async def get_value(
        self,
        key: str,
        field: str,
        default: Any = None,
    ) -> Any:
        """설정의 특정 필드 조회"""
        config = await self.get(key)
        return config.get(field, default)

    async def set(
        self,
        key: str,
        value: dict[str, Any],
        updated_by: str = "system",
    ) -> None:
        """설정 저장 (UPSERT)

        Args:
            key: 설정 키
            value: 설정 값
            updated_by: 업데이트 주체

        Raises:
            StoreFailure: DB 쓰기 실패
        """
        now = datetime.now(timezone.utc).isoformat()
        value_json = json.dumps(value, ensure_ascii=False)

        async with self.db.transaction():
            await self.db.execute(
                """
                INSERT INTO config_store (config_key, value_json, version, updated_by, created_at, updated_at)
                VALUES (?, ?, 1, ?, ?, ?)
                ON CONFLICT(config_key) DO UPDATE SET
                    value_json = excluded.value_json,
                    version = config_store.version + 1,
                    updated_by = excluded.updated_by,
                    updated_at = excluded.updated_at
                """,
                (key, value_json, updated_by, now, now),
            )

        # 캐시 무효화
        self._cache.pop(key, None)
        logger.info(f"Config '{key}' updated by {updated_by}")

    async def update_field(
        self,
        key: str,
        field: str,
        value: Any,
        updated_by: str = "system",
    ) -> None:
        """설정의 특정 필드만 업데이트"""
        if field not in DEFAULT_CONFIGS.get(key, {}):
            raise InvalidInput(f"Unknown config field: {key}.{field}")

        config = await self.get(key, use_cache=False)
        config[field] = value
        await self.set(key, config, updated_by)

    async def ensure_defaults(self) -> None:
        """기본 설정이 없으면 생성

        앱 시작 시 호출하여 필수 설정이 존재하도록 보장.
        """
        for key, default_value in DEFAULT_CONFIGS.items():
            row = await self.db.fetchone(
                "SELECT 1 FROM config_store WHERE config_key = ?",
                (key,),
            )
            if not row:
                await self.set(key, default_value, updated_by="init")
                logger.info(f"Created default config: {key}")

    def clear_cache(self) -> None:
        """캐시 초기화"""
        self._cache.clear()

    # =========================================================================
    # 정산 정책
    # =========================================================================

    async def get_settlement_policy(self) -> dict[str, bool]:
        """정산 정책 조회 (누락 필드는 기본값)

        Returns:
            {"allow_negative_balance": bool, "enforce_frozen": bool}
        """
        config = await self.get("settlement")
        defaults = DEFAULT_CONFIGS["settlement"]
        return {
            field: bool(config.get(field, default))
            for field, default in defaults.items()
        }

    async def update_settlement_policy(
        self,
        changes: Any,
        updated_by: str = "admin",
    ) -> dict[str, bool]:
        """정산 정책 변경 (지정한 필드만, 한 작업 단위로)

        Args:
            changes: {"allow_negative_balance": bool, "enforce_frozen": bool} 일부
            updated_by: 업데이트 주체

        Returns:
            변경 후 정산 정책

        Raises:
            InvalidInput: 빈 요청, 알 수 없는 필드, bool이 아닌 값
        """
        if not isinstance(changes, dict) or not changes:
            raise InvalidInput("Invalid settlement policy")

        for field, value in changes.items():
            if field not in DEFAULT_CONFIGS["settlement"]:
                raise InvalidInput(f"Unknown config field: settlement.{field}")
            if not isinstance(value, bool):
                raise InvalidInput(f"Invalid {field}")

        async with self.db.transaction():
            for field, value in changes.items():
                await self.update_field("settlement", field, value, updated_by)

        return await self.get_settlement_policy()

    async def get_saved_win_side(self) -> str | None:
        """저장된 승리 방향 (없으면 None)"""
        return await self.get_value("outcome", "win_side")

    async def save_win_side(self, side: str, updated_by: str = "admin") -> None:
        """승리 방향 저장 (재시작 후 복원용)"""
        await self.set("outcome", {"win_side": side}, updated_by=updated_by)


async def init_default_configs(db: SQLiteAdapter) -> None:
    """기본 설정 초기화

    앱 시작 시 호출하여 기본 설정이 존재하도록 보장.

    Args:
        db: SQLiteAdapter 인스턴스
    """
    config_store = ConfigStore(db)
    await config_store.ensure_defaults()
