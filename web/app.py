"""
FastAPI 애플리케이션

라우터 등록, 생명주기(DB/서비스 초기화), 에러 응답 형식 설정.
모든 에러 응답은 {"error": message} 형식.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from adapters.market.price_oracle import PriceOracle
from core.config.loader import Settings, get_settings
from core.errors import LedgerError
from core.ledger.engine import LedgerEngine
from core.storage.config_store import ConfigStore, init_default_configs
from core.trading.admin import AdminControl
from core.trading.conversion import ConversionService
from core.trading.outcome import OutcomeCell
from core.trading.settlement import SettlementEngine
from core.trading.wallet import WalletService
from core.types import WIN_SIDES
from web.routes import account, admin, health, prices, trading, wallet
from web.routes.health import API_VERSION

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    oracle: PriceOracle | None = None,
) -> FastAPI:
    """앱 생성

    Args:
        settings: 설정 (None이면 settings.yaml 로드)
        oracle: 시세 조회기 (None이면 설정값으로 생성, 테스트 주입용)

    Returns:
        FastAPI 인스턴스
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """앱 생명주기 관리"""
        db = SQLiteAdapter(settings.db_path)
        await db.connect()
        await init_schema(db)
        await init_default_configs(db)

        config_store = ConfigStore(db)
        saved_side = await config_store.get_saved_win_side()
        outcome = OutcomeCell(
            saved_side if saved_side in WIN_SIDES else settings.default_win_side
        )

        price_oracle = oracle or PriceOracle(
            url=settings.price_api_url,
            timeout=settings.price_timeout_sec,
            cache_ttl_seconds=settings.price_cache_ttl_sec,
        )
        ledger = LedgerEngine(db, settings.primary_currency)

        app.state.settings = settings
        app.state.db = db
        app.state.oracle = price_oracle
        app.state.ledger = ledger
        app.state.outcome = outcome
        app.state.config_store = config_store
        app.state.wallet = WalletService(db, ledger)
        app.state.conversion = ConversionService(db, ledger, price_oracle, config_store)
        app.state.settlement = SettlementEngine(db, ledger, outcome, config_store)
        app.state.admin = AdminControl(db, ledger, outcome, config_store)

        logger.info(
            f"Web 시작: db={settings.db_path}, win_side={outcome.value}, "
            f"primary={settings.primary_currency}"
        )

        try:
            yield
        finally:
            await price_oracle.close()
            await db.close()
            logger.info("Web 종료: 리소스 정리 완료")

    app = FastAPI(
        title="Ledger API",
        description="Custodial balance ledger and trade settlement API",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS 설정 (개발용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    # =========================================================================
    # API 라우터 등록
    # =========================================================================

    app.include_router(health.router)
    app.include_router(prices.router)
    app.include_router(wallet.router)
    app.include_router(account.router)
    app.include_router(trading.router)
    app.include_router(admin.router)

    return app


def _register_error_handlers(app: FastAPI) -> None:
    """에러 응답을 {"error": message} 형식으로 통일"""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            field = ".".join(str(p) for p in errors[0].get("loc", ()) if p != "body")
            message = f"Invalid {field}" if field else "Invalid request"
        else:
            message = "Invalid request"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


app = create_app()
