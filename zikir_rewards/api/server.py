"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from zikir_rewards import __version__
from zikir_rewards.api.routes import router
from zikir_rewards.api.middleware import setup_cors, setup_rate_limiting
from zikir_rewards.config import (
    GAMIFICATION_RULES_PATH,
    LOG_LEVEL,
    SPECIAL_STATUS_LEVEL,
    STORAGE_BACKEND,
    validate_config,
)
from zikir_rewards.db.repository import create_repository
from zikir_rewards.exceptions import ZikirRewardsError
from zikir_rewards.gamification.rules import load_rules
from zikir_rewards.services.container import ServiceContainer

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
)

logger = logging.getLogger(__name__)


def status_code_for(exc: ZikirRewardsError) -> int:
    """HTTP status for a service error"""
    return exc.status_code


def build_container() -> ServiceContainer:
    """
    Build the service container from configuration

    Raises:
        ValueError: If configuration is invalid
        ConfigurationError: If the gamification rules are malformed
    """
    validate_config()
    rules = load_rules(GAMIFICATION_RULES_PATH)
    repository = create_repository(STORAGE_BACKEND)
    return ServiceContainer(
        repository=repository,
        rules=rules,
        special_status_level=SPECIAL_STATUS_LEVEL,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting API server...")
    if getattr(app.state, "container", None) is None:
        app.state.container = build_container()
    await app.state.container.startup()
    logger.info(f"Storage backend ready: {app.state.container.repository.name}")

    yield

    # Shutdown
    logger.info("Shutting down API server...")
    await app.state.container.shutdown()


def create_api_application(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        container: Pre-built services (tests); built from configuration at
            startup when omitted
    """
    app = FastAPI(
        title="Zikir Rewards API",
        description="Gamification accrual service for zikir counting",
        version=__version__,
        lifespan=lifespan
    )
    app.state.container = container

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(ZikirRewardsError)
    async def service_exception_handler(request: Request, exc: ZikirRewardsError):
        return JSONResponse(
            status_code=status_code_for(exc),
            content=exc.to_dict()
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app


app = create_api_application()
