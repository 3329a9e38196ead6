"""
설정 로더

settings.yaml 로드 및 애플리케이션 설정 생성
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths, PriceEndpoints
from core.types import WIN_SIDES


@dataclass(frozen=True)
class Settings:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    db_path: Path = Paths.DB_FILE
    primary_currency: str = Defaults.PRIMARY_CURRENCY
    default_win_side: str = Defaults.WIN_SIDE
    price_api_url: str = PriceEndpoints.TICKER_PRICE_URL
    price_timeout_sec: float = Defaults.PRICE_TIMEOUT_SEC
    price_cache_ttl_sec: float = Defaults.PRICE_CACHE_TTL_SEC
    web_host: str = Defaults.WEB_HOST
    web_port: int = Defaults.WEB_PORT


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _resolve_path(value: str | Path) -> Path:
    """상대 경로는 프로젝트 루트 기준으로 해석"""
    path = Path(value)
    if not path.is_absolute() and str(value) != ":memory:":
        path = PROJECT_ROOT / path
    return path


def parse_settings(data: dict[str, Any]) -> Settings:
    """YAML 데이터에서 Settings 생성

    Args:
        data: safe_load 결과 (dict)

    Returns:
        Settings 인스턴스

    Raises:
        SettingsLoadError: 값이 유효하지 않은 경우
    """
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    win_side = str(data.get("default_win_side", Defaults.WIN_SIDE)).lower()
    if win_side not in WIN_SIDES:
        raise SettingsLoadError(
            f"유효하지 않은 default_win_side입니다: '{win_side}'. "
            f"유효한 값: {list(WIN_SIDES)}"
        )

    web_config = data.get("web") or {}

    try:
        return Settings(
            db_path=_resolve_path(data.get("db_path", Paths.DB_FILE)),
            primary_currency=str(
                data.get("primary_currency", Defaults.PRIMARY_CURRENCY)
            ).upper(),
            default_win_side=win_side,
            price_api_url=str(
                data.get("price_api_url", PriceEndpoints.TICKER_PRICE_URL)
            ),
            price_timeout_sec=float(
                data.get("price_timeout_sec", Defaults.PRICE_TIMEOUT_SEC)
            ),
            price_cache_ttl_sec=float(
                data.get("price_cache_ttl_sec", Defaults.PRICE_CACHE_TTL_SEC)
            ),
            web_host=str(web_config.get("host", Defaults.WEB_HOST)),
            web_port=int(web_config.get("port", Defaults.WEB_PORT)),
        )
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"settings.yaml 값 변환 실패: {e}") from e


def load_settings(path: Path | None = None) -> Settings:
    """settings.yaml 파일 로드

    파일이 없으면 기본값을 사용.

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 인스턴스

    Raises:
        SettingsLoadError: 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        return Settings()

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        return Settings()

    return parse_settings(data)


_settings: Settings | None = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 싱글턴 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 인스턴스 (최초 호출 시 로드)
    """
    global _settings
    if _settings is None:
        _settings = load_settings(settings_path)
    return _settings


def reset_settings() -> None:
    """싱글턴 인스턴스 초기화 (테스트용)"""
    global _settings
    _settings = None
