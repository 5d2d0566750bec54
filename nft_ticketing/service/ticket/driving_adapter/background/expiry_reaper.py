from typing import Callable, Optional

import anyio
from anyio.abc import TaskGroup

from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.platform.metrics.ticketing_metrics import metrics
from nft_ticketing.service.ticket.app.command.reap_expired_reservations_use_case import (
    ReapExpiredReservationsUseCase,
)
from nft_ticketing.service.ticket.app.dto.purchase_dto import ReapResult


class ExpiryReaper:
    """Periodic sweep of lapsed reservations, run inside the app lifespan task group"""

    def __init__(
        self,
        *,
        use_case_factory: Callable[[], ReapExpiredReservationsUseCase],
        interval_seconds: float,
    ) -> None:
        self._use_case_factory = use_case_factory
        self._interval_seconds = interval_seconds

    async def start(self, *, task_group: TaskGroup) -> None:
        task_group.start_soon(self._run_forever)
        Logger.base.info(f'🧹 [REAPER] Started, sweeping every {self._interval_seconds}s')

    async def run_once(self) -> Optional[ReapResult]:
        """One sweep; a failure is logged and reported as None."""
        try:
            return await self._use_case_factory().execute()
        except Exception as e:
            metrics.record_reaper_run(result='error', deleted_tickets=0, expired_purchases=0)
            Logger.base.error(f'❌ [REAPER] Sweep failed: {type(e).__name__}: {e}')
            return None

    async def _run_forever(self) -> None:
        while True:
            await self.run_once()
            await anyio.sleep(self._interval_seconds)
