"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from nft_ticketing.platform.config.core_setting import settings
from nft_ticketing.platform.exception.exception_handlers import register_exception_handlers
from nft_ticketing.platform.observability.tracing import TracingConfig
from nft_ticketing.service.ticket.driving_adapter.http_controller.analytics_controller import (
    router as analytics_router,
)
from nft_ticketing.service.ticket.driving_adapter.http_controller.check_in_controller import (
    router as check_in_router,
)
from nft_ticketing.service.ticket.driving_adapter.http_controller.purchase_controller import (
    router as purchase_router,
)
from nft_ticketing.service.ticket.driving_adapter.http_controller.settlement_controller import (
    router as settlement_router,
)
from nft_ticketing.service.ticket.driving_adapter.http_controller.ticket_controller import (
    router as ticket_router,
)
from nft_ticketing.service.ticket.driving_adapter.http_controller.ticket_type_controller import (
    router as ticket_type_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'NFT ticketing: purchase, mint and check-in',
    service_name: str = settings.SERVICE_NAME,
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description
        service_name: Service name for tracing

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Auto-instrument FastAPI (must be done before mounting routes)
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(ticket_type_router, prefix='/api/ticket_type', tags=['ticket_type'])
    app.include_router(purchase_router, prefix='/api/purchase', tags=['purchase'])
    app.include_router(ticket_router, prefix='/api/ticket', tags=['ticket'])
    app.include_router(check_in_router, prefix='/api/check_in', tags=['check_in'])
    app.include_router(settlement_router, prefix='/api/settlement', tags=['settlement'])
    app.include_router(analytics_router, prefix='/api/analytics', tags=['analytics'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': settings.SERVICE_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
