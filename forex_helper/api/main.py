"""FastAPI application factory and lifespan management."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from forex_helper.config import settings
from forex_helper.errors import (
    DivisionByZeroError,
    OwnershipError,
    PreconditionError,
    TradeRejectedError,
)
from forex_helper.metrics import MetricsAggregator
from forex_helper.pip_value import PipValueResolver
from forex_helper.position_size import PositionSizeEngine
from forex_helper.rates import RateProvider, build_rate_provider
from forex_helper.report import ReportGenerator
from forex_helper.trade_validator import TradeValidator

# Wired services, read by route handlers
app_state: dict = {}


def build_components(rate_provider: RateProvider | None = None) -> dict:
    """Wire the engine's services together."""
    provider = rate_provider if rate_provider is not None else build_rate_provider(settings)
    resolver = PipValueResolver(provider)
    aggregator = MetricsAggregator()
    return {
        "rate_provider": provider,
        "pip_value_resolver": resolver,
        "position_size_engine": PositionSizeEngine(resolver),
        "trade_validator": TradeValidator(),
        "metrics_aggregator": aggregator,
        "report_generator": ReportGenerator(aggregator),
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    logger.info("Starting Forex Helper API...")
    if not app_state:
        app_state.update(build_components())
    yield
    logger.info("Forex Helper API stopped")
    app_state.clear()


async def _precondition_handler(request: Request, exc: PreconditionError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _ownership_handler(request: Request, exc: OwnershipError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=403, content={"detail": str(exc)})


async def _rejected_handler(request: Request, exc: TradeRejectedError):
    return JSONResponse(status_code=422, content={"detail": exc.errors})


async def _division_handler(request: Request, exc: DivisionByZeroError):
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _value_error_handler(request: Request, exc: ValidationError):
    messages = [e["msg"] for e in exc.errors()]
    logger.warning(f"{request.method} {request.url.path}: invalid input {messages}")
    return JSONResponse(status_code=422, content={"detail": messages})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Forex Helper API",
        description="Position sizing and trading performance analytics",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(OwnershipError, _ownership_handler)
    app.add_exception_handler(PreconditionError, _precondition_handler)
    app.add_exception_handler(DivisionByZeroError, _division_handler)
    app.add_exception_handler(TradeRejectedError, _rejected_handler)
    app.add_exception_handler(ValidationError, _value_error_handler)

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "rates": "http" if settings.use_http_rates else "static"}

    from forex_helper.api.lot_calculator import router as lot_calculator_router
    from forex_helper.api.reports import router as reports_router
    from forex_helper.api.trades import router as trades_router

    app.include_router(lot_calculator_router)
    app.include_router(trades_router)
    app.include_router(reports_router)

    return app
