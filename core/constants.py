"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class PriceEndpoints:
    """시세 조회 엔드포인트 (고정값)

    공식 문서: https://developers.binance.com/docs/binance-spot-api-docs/rest-api
    """

    # 전체 심볼 현재가 (Spot)
    TICKER_PRICE_URL: str = "https://api.binance.com/api/v3/ticker/price"

    # 시세 심볼 접미사 (BTCUSDT → BTC)
    QUOTE_SUFFIX: str = "USDT"


# 시세 조회 실패 시 사용하는 고정 시세표 (USDT 기준)
FALLBACK_PRICES: dict[str, float] = {
    "BTC": 95000.0,
    "ETH": 3600.0,
    "BNB": 600.0,
    "SOL": 150.0,
    "USDT": 1.0,
}


class Defaults:
    """기본값 상수"""

    # 플랫폼 기본 통화 (users.balance 레거시 잔고의 통화)
    PRIMARY_CURRENCY: str = "USDT"

    # 관리자 승리 방향 초기값 (long / short)
    WIN_SIDE: str = "short"

    # 사용자 최소 거래 금액
    MIN_TRADE_AMOUNT: float = 10.0

    PRICE_TIMEOUT_SEC: float = 10.0
    PRICE_CACHE_TTL_SEC: float = 5.0

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 3001

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    DB_FILE: Path = DATA_DIR / "ledger.db"
