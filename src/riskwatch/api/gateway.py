"""API Gateway - FastAPI application for the risk register and asset dashboard."""

import threading
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional
from uuid import uuid4

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from riskwatch.api.schemas import (
    AssetListResponse,
    ErrorResponse,
    MitigationsRequest,
    RescoreResponse,
    RiskListResponse,
)
from riskwatch.api.service import RiskWatchServices
from riskwatch.common.config import get_config
from riskwatch.common.constants import QueryConstants
from riskwatch.common.exceptions import (
    ConfirmationRequiredError,
    RecordNotFoundError,
    RiskWatchException,
    StoreError,
    ValidationError,
)
from riskwatch.common.logging import get_logger
from riskwatch.data.schemas.asset import Asset
from riskwatch.data.schemas.risk import Risk
from riskwatch.governance.audit import AuditContext
from riskwatch.query.engine import asset_query_engine, risk_query_engine
from riskwatch.query.export import assets_to_csv, risks_to_csv
from riskwatch.query.filters import QueryFilters

logger = get_logger("riskwatch_api")

ALL = QueryConstants.FILTER_ALL


class ServiceManager:
    """Thread-safe service singleton manager."""

    _instance: Optional[RiskWatchServices] = None
    _lock = threading.Lock()
    _initialized = False

    @classmethod
    def get_services(cls) -> RiskWatchServices:
        """Get or create the service container (thread-safe)."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = RiskWatchServices()
                    cls._initialized = True
                    logger.info("RiskWatch services initialized")
        return cls._instance

    @classmethod
    def install(cls, services: RiskWatchServices) -> None:
        """Use a pre-built container (tests, embedding)."""
        with cls._lock:
            cls._instance = services
            cls._initialized = True

    @classmethod
    async def shutdown(cls) -> None:
        """Shutdown the services and release resources."""
        with cls._lock:
            services, cls._instance = cls._instance, None
            cls._initialized = False
        if services is not None:
            await services.shutdown()


def get_services() -> RiskWatchServices:
    return ServiceManager.get_services()


def audit_context(
    request: Request,
    x_actor_id: Optional[str] = Header(default=None),
    x_organization_id: Optional[str] = Header(default=None),
    x_department: Optional[str] = Header(default=None),
    user_agent: Optional[str] = Header(default=None),
) -> AuditContext:
    """Acting user and organization, as asserted by the upstream auth layer."""
    client_host = request.client.host if request.client else None
    return AuditContext(
        actor_id=x_actor_id,
        organization_id=x_organization_id,
        department=x_department,
        user_agent=user_agent,
        ip_address=client_host,
    )


# =============================================================================
# CORS CONFIGURATION
# =============================================================================

def get_cors_origins() -> List[str]:
    """Get allowed CORS origins from RISKWATCH_CORS_ORIGINS.

    Example: RISKWATCH_CORS_ORIGINS="https://app.example.com,https://admin.example.com"
    """
    config = get_config()
    if config.cors_origins:
        return config.cors_origins

    if config.is_production:
        logger.warning(
            "RISKWATCH_CORS_ORIGINS not set in production. "
            "CORS will be disabled. Set RISKWATCH_CORS_ORIGINS for cross-origin access."
        )
        return []

    logger.warning("Running in development mode with permissive CORS (allow_origins=['*'])")
    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("RiskWatch API starting up...")
    get_services().start()
    logger.info("RiskWatch API ready")

    yield

    logger.info("RiskWatch API shutting down...")
    await ServiceManager.shutdown()
    logger.info("RiskWatch API shutdown complete")


app = FastAPI(
    title="RiskWatch API",
    description="Risk register and asset risk dashboard.",
    version="0.1.0",
    lifespan=lifespan,
)

cors_origins = get_cors_origins()
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID", "X-Actor-Id", "X-Organization-Id"],
    )


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def _error(request: Request, status_code: int, error: str, message: str, fields=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            message=message,
            fields=fields or [],
            request_id=getattr(request.state, "request_id", None),
        ).model_dump(),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning(f"Validation error: {exc.message} {exc.fields}")
    return _error(request, 400, "validation_error", exc.message, exc.fields)


@app.exception_handler(ConfirmationRequiredError)
async def confirmation_error_handler(request: Request, exc: ConfirmationRequiredError) -> JSONResponse:
    return _error(request, 409, "confirmation_required", exc.message)


@app.exception_handler(RecordNotFoundError)
async def not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return _error(request, 404, "not_found", exc.message)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error(f"Store failure during {exc.operation}: {exc.message}")
    return _error(request, 502, "store_error", exc.message)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Unknown filter or sort values."""
    logger.warning(f"Invalid request value: {exc}")
    return _error(request, 400, "validation_error", str(exc))


@app.exception_handler(RiskWatchException)
async def riskwatch_error_handler(request: Request, exc: RiskWatchException) -> JSONResponse:
    logger.error(f"Unhandled {exc.code}: {exc.message}")
    return _error(request, 500, "processing_error", "An error occurred while processing the request")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Logs full exception but returns a sanitized message."""
    logger.exception(f"Unexpected error: {type(exc).__name__}")
    return _error(request, 500, "internal_error", "An unexpected error occurred")


# =============================================================================
# MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to each request for tracing."""
    request_id = f"req_{uuid4().hex[:12]}"
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "service": "riskwatch-api"}


@app.get("/ready")
async def readiness_check() -> dict:
    """Returns 503 until the service container is initialized."""
    if not ServiceManager._initialized:
        raise HTTPException(status_code=503, detail="not_ready")
    stats = ServiceManager.get_services().audit_writer.get_stats()
    return {"status": "ready", "service": "riskwatch-api", "audit": stats}


@app.get("/risks", response_model=RiskListResponse)
async def list_risks(
    search: str = "",
    category: str = ALL,
    status: str = ALL,
    level: str = ALL,
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    services: RiskWatchServices = Depends(get_services),
) -> RiskListResponse:
    """Filtered, sorted risks with statistics over the whole register."""
    engine = risk_query_engine()
    filters = QueryFilters(search=search, category=category, status=status, level=level)
    result = engine.run(await services.risks.list_risks(), filters, engine.sort_state(sort, direction))
    return RiskListResponse(
        items=result.items,
        stats=result.stats,
        matched=result.matched,
        sort_field=result.sort_field,
        sort_direction=result.sort_direction.value,
    )


@app.get("/risks/export", response_class=PlainTextResponse)
async def export_risks(
    search: str = "",
    category: str = ALL,
    status: str = ALL,
    level: str = ALL,
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    services: RiskWatchServices = Depends(get_services),
) -> PlainTextResponse:
    engine = risk_query_engine()
    filters = QueryFilters(search=search, category=category, status=status, level=level)
    result = engine.run(await services.risks.list_risks(), filters, engine.sort_state(sort, direction))
    return PlainTextResponse(risks_to_csv(result.items), media_type="text/csv")


@app.post("/risks", response_model=Risk, status_code=201)
async def create_risk(
    payload: Dict[str, Any] = Body(...),
    context: AuditContext = Depends(audit_context),
    services: RiskWatchServices = Depends(get_services),
) -> Risk:
    return await services.risks.create_risk(payload, context)


@app.patch("/risks/{risk_id}", response_model=Risk)
async def update_risk(
    risk_id: str,
    payload: Dict[str, Any] = Body(...),
    context: AuditContext = Depends(audit_context),
    services: RiskWatchServices = Depends(get_services),
) -> Risk:
    return await services.risks.update_risk(risk_id, payload, context)


@app.delete("/risks/{risk_id}", response_model=Risk)
async def delete_risk(
    risk_id: str,
    confirm: bool = Query(default=False, description="Must be true; deletion cannot be undone"),
    context: AuditContext = Depends(audit_context),
    services: RiskWatchServices = Depends(get_services),
) -> Risk:
    return await services.risks.delete_risk(risk_id, context, confirmed=confirm)


@app.get("/assets", response_model=AssetListResponse)
async def list_assets(
    search: str = "",
    category: str = ALL,
    status: str = ALL,
    level: str = ALL,
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    services: RiskWatchServices = Depends(get_services),
) -> AssetListResponse:
    """Filtered, sorted assets. ``category`` filters on asset type."""
    engine = asset_query_engine()
    filters = QueryFilters(search=search, category=category, status=status, level=level)
    result = engine.run(await services.assets.list_assets(), filters, engine.sort_state(sort, direction))
    return AssetListResponse(
        items=result.items,
        stats=result.stats,
        matched=result.matched,
        sort_field=result.sort_field,
        sort_direction=result.sort_direction.value,
    )


@app.get("/assets/export", response_class=PlainTextResponse)
async def export_assets(
    search: str = "",
    category: str = ALL,
    status: str = ALL,
    level: str = ALL,
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    services: RiskWatchServices = Depends(get_services),
) -> PlainTextResponse:
    engine = asset_query_engine()
    filters = QueryFilters(search=search, category=category, status=status, level=level)
    result = engine.run(await services.assets.list_assets(), filters, engine.sort_state(sort, direction))
    return PlainTextResponse(assets_to_csv(result.items), media_type="text/csv")


@app.post("/assets", response_model=Asset, status_code=201)
async def create_asset(
    payload: Dict[str, Any] = Body(...),
    context: AuditContext = Depends(audit_context),
    services: RiskWatchServices = Depends(get_services),
) -> Asset:
    asset = await services.assets.create_asset(payload, context)
    if asset is None:
        raise HTTPException(status_code=409, detail="superseded")
    return asset


@app.put("/assets/{asset_id}/mitigations", response_model=Asset)
async def update_asset_mitigations(
    asset_id: str,
    request: MitigationsRequest,
    context: AuditContext = Depends(audit_context),
    services: RiskWatchServices = Depends(get_services),
) -> Asset:
    return await services.assets.update_mitigations(asset_id, request.mitigations, context)


@app.post("/assets/{asset_id}/rescore", response_model=RescoreResponse)
async def rescore_asset(
    asset_id: str,
    context: AuditContext = Depends(audit_context),
    services: RiskWatchServices = Depends(get_services),
) -> RescoreResponse:
    asset = await services.assets.rescore_asset(asset_id, context)
    return RescoreResponse(applied=asset is not None, asset=asset)


@app.delete("/assets/{asset_id}", response_model=Asset)
async def delete_asset(
    asset_id: str,
    confirm: bool = Query(default=False, description="Must be true; deletion cannot be undone"),
    context: AuditContext = Depends(audit_context),
    services: RiskWatchServices = Depends(get_services),
) -> Asset:
    return await services.assets.delete_asset(asset_id, context, confirmed=confirm)


# =============================================================================
# DEVELOPMENT SERVER
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run(
        "riskwatch.api.gateway:app",
        host=config.api_host,
        port=config.api_port,
        reload=config.is_development,
        log_level=config.log_level.value.lower(),
    )
