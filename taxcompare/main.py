"""
main.py — taxcompare FastAPI application entry point.

Start with: uvicorn taxcompare.main:app --reload --port 8000
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taxcompare.config import settings
from taxcompare.engine.errors import RegimeConfigError

# ---------------------------------------------------------------------------
# Logging — configured before anything else
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan — startup & shutdown hooks
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: build every registered regime once so a bad dataset fails the
    deploy instead of the first request.
    """
    from taxcompare.engine.regimes import get_regime_pair, list_financial_years

    years = list_financial_years()
    for year in years:
        get_regime_pair(year)
    logger.info("Regime catalogue loaded: %s", ", ".join(years))
    logger.info("taxcompare v%s starting up", settings.app_version)
    yield
    logger.info("taxcompare shutting down")


# ---------------------------------------------------------------------------
# FastAPI application instance
# ---------------------------------------------------------------------------
app = FastAPI(
    title="taxcompare API",
    version=settings.app_version,
    description=(
        "Income-tax estimator for Indian individuals. "
        "Computes tax under the Old and New regimes and reports the cheaper one."
    ),
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error envelope — every failure leaves as {"error": {code, message, details}}
# ---------------------------------------------------------------------------
_HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "VALIDATION_ERROR",
}


def _error_envelope(
    status_code: int,
    code: str,
    message: str,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, "details": details or []}},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    422 for requests FastAPI could not bind.

    Amounts are coerced rather than rejected, so what lands here is an unknown
    body field, a non-object body or a bad query value such as regime=flat.
    """
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body") or None,
            "issue": err["msg"],
        }
        for err in exc.errors()
    ]
    return _error_envelope(422, "VALIDATION_ERROR", "Request validation failed", details)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Unknown financial year / regime (404) and routing errors."""
    code = _HTTP_ERROR_CODES.get(exc.status_code, f"HTTP_{exc.status_code}")
    return _error_envelope(exc.status_code, code, str(exc.detail))


@app.exception_handler(RegimeConfigError)
async def regime_config_error_handler(
    request: Request, exc: RegimeConfigError
) -> JSONResponse:
    """
    A regime dataset is malformed. This is a deployment bug, not bad user
    input, so no figures are returned.
    """
    logger.error("Regime configuration error on %s: %s", request.url.path, exc)
    return _error_envelope(
        500,
        "CONFIGURATION_ERROR",
        "Tax rules are misconfigured; no estimate was produced",
        [{"issue": str(exc)}] if settings.debug else [],
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else. The traceback goes to the log; the client sees it only in debug."""
    logger.error(
        "Unhandled exception on %s %s", request.method, request.url.path, exc_info=True,
    )
    details = [{"issue": f"{type(exc).__name__}: {exc}"}] if settings.debug else []
    return _error_envelope(500, "INTERNAL_ERROR", "An unexpected error occurred", details)


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------
@app.get("/api/health", tags=["System"])
async def health_check() -> dict:
    """Returns service health status."""
    return {
        "status": "ok",
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from taxcompare.api.routes import router as tax_router  # noqa: E402

app.include_router(tax_router)
