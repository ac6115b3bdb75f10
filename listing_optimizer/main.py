# listing_optimizer/main.py - Amazon Listing Optimizer API
# Handles: optimize-by-ASIN, optimization history, health

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import AsyncOpenAI
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import SERVICE_NAME, SERVICE_VERSION, Config, settings
from .db import OptimizationRepository, create_engine, create_session_factory, migrate, ping
from .errors import UNEXPECTED_ERROR_MESSAGE, ListingOptimizerError
from .middleware import RequestLoggingMiddleware, get_request_id
from .models import HealthResponse
from .routers import history_router, optimize_router
from .services import AmazonFetcher, ListingExtractor, ListingOptimizer, ProductService, build_client

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(
    app_settings: Optional[Config] = None,
    ai_client: Optional[AsyncOpenAI] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the FastAPI application
    Args:
        app_settings: Configuration (defaults to the environment)
        ai_client: Pre-built AsyncOpenAI-compatible client
        http_client: Pre-built httpx client for Amazon requests
    """
    cfg = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {SERVICE_NAME} v{SERVICE_VERSION}")
        engine = create_engine(cfg.DATABASE_URL, echo=cfg.DATABASE_ECHO)

        if cfg.AUTO_MIGRATE:
            try:
                await migrate(engine)
            except (SQLAlchemyError, OSError) as e:
                logger.error(f"Database migration failed: {e}")

        fetcher = AmazonFetcher(domain=cfg.AMAZON_DOMAIN, client=http_client)
        client = ai_client
        if client is None:
            client = build_client(cfg.OPENAI_API_KEY, cfg.OPENAI_BASE_URL, cfg.OPENAI_TIMEOUT)
        optimizer = ListingOptimizer(client, model=cfg.OPENAI_MODEL)
        repository = OptimizationRepository(create_session_factory(engine))

        app.state.engine = engine
        app.state.ai_configured = client is not None
        app.state.repository = repository
        app.state.product_service = ProductService(
            fetcher=fetcher,
            extractor=ListingExtractor(),
            optimizer=optimizer,
            repository=repository,
        )
        logger.info(f"Amazon domain: {cfg.AMAZON_DOMAIN}, model: {cfg.OPENAI_MODEL}")

        yield

        logger.info("Shutting down")
        await fetcher.aclose()
        await engine.dispose()

    app = FastAPI(
        title=SERVICE_NAME,
        description="Scrape Amazon listings by ASIN and optimize them with AI",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(optimize_router)
    app.include_router(history_router)

    # ============================================================
    # ROOT / HEALTH
    # ============================================================

    @app.get("/")
    async def root():
        return {"message": SERVICE_NAME, "version": SERVICE_VERSION}

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz(request: Request):
        """Health check endpoint"""
        engine = getattr(request.app.state, "engine", None)
        reachable = await ping(engine) if engine is not None else False
        return HealthResponse(
            status="ok" if reachable else "degraded",
            version=SERVICE_VERSION,
            openai_configured=getattr(request.app.state, "ai_configured", False),
            database_reachable=reachable,
        )

    # ============================================================
    # ERROR HANDLERS
    # ============================================================

    @app.exception_handler(ListingOptimizerError)
    async def listing_error_handler(request: Request, exc: ListingOptimizerError):
        """Map pipeline errors to their status and public message"""
        logger.error(f"[{get_request_id(request)}] {type(exc).__name__} ({exc.status_code}): {exc}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.user_message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies and out-of-range query parameters"""
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.error(f"[{get_request_id(request)}] Validation error: {message}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions"""
        detail = exc.detail
        if exc.status_code == 404 and detail == "Not Found":
            detail = "Route not found"
        logger.error(f"[{get_request_id(request)}] HTTP {exc.status_code}: {detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": detail},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions"""
        logger.error(f"[{get_request_id(request)}] Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": UNEXPECTED_ERROR_MESSAGE},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
