"""
Production FastAPI Application

HTTP API plus the expiry reaper running in the lifespan task group.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from nft_ticketing.platform.app_factory import create_app
from nft_ticketing.platform.config import di
from nft_ticketing.platform.config.core_setting import settings
from nft_ticketing.platform.config.di import container
from nft_ticketing.platform.config.wire_modules import WIRE_MODULES
from nft_ticketing.platform.database.orm_db_setting import (
    create_db_and_tables,
    dispose_engine,
    get_engine,
)
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.platform.observability.tracing import TracingConfig
from nft_ticketing.service.ticket.app.command.reap_expired_reservations_use_case import (
    ReapExpiredReservationsUseCase,
)
from nft_ticketing.service.ticket.driving_adapter.background.expiry_reaper import ExpiryReaper


def build_expiry_reaper() -> ExpiryReaper:
    return ExpiryReaper(
        use_case_factory=lambda: ReapExpiredReservationsUseCase(
            uow=container.unit_of_work(), inventory_ledger=container.inventory_ledger()
        ),
        interval_seconds=settings.EXPIRY_REAPER_INTERVAL_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Ticket Service] Starting up...')

    tracing = TracingConfig(service_name=settings.SERVICE_NAME)
    tracing.setup()
    Logger.base.info('📊 [Ticket Service] OpenTelemetry tracing configured')

    di.setup()
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Ticket Service] Dependency injection wired')

    tracing.instrument_sqlalchemy(engine=get_engine())
    await create_db_and_tables()
    Logger.base.info('🗄️  [Ticket Service] Database tables ready')

    async with anyio.create_task_group() as tg:
        if settings.EXPIRY_REAPER_ENABLED:
            await build_expiry_reaper().start(task_group=tg)

        Logger.base.info('✅ [Ticket Service] Ready to serve requests')
        yield

        Logger.base.info('🛑 [Ticket Service] Shutting down...')
        tg.cancel_scope.cancel()

    await di.cleanup()
    await dispose_engine()
    Logger.base.info('🗄️  [Ticket Service] Database engine disposed')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Ticket Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
