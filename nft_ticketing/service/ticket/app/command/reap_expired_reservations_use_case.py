from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.platform.metrics.ticketing_metrics import metrics
from nft_ticketing.service.ticket.app.dto.purchase_dto import ReapResult
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger


class ReapExpiredReservationsUseCase:
    """
    Reclaim inventory held by lapsed reservations.

    One transaction: lock the affected ticket types, delete PENDING_PAYMENT
    tickets past their expiry, recount each type, then mark overdue INITIATED
    purchases EXPIRED. PAID and MINTING tickets are never reaped.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, inventory_ledger: InventoryLedger) -> None:
        self.uow = uow
        self.inventory_ledger = inventory_ledger
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        inventory_ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
    ) -> Self:
        return cls(uow=uow, inventory_ledger=inventory_ledger)

    @Logger.io
    async def execute(self, *, now: Optional[datetime] = None) -> ReapResult:
        with self.tracer.start_as_current_span('use_case.reap_expired_reservations'):
            now = now or datetime.now(timezone.utc)
            async with self.uow:
                ticket_type_ids = await self.uow.ticket_repo.list_ticket_type_ids_with_expired_pending(
                    now=now
                )
                await self.uow.ticket_type_repo.lock_many(ticket_type_ids=ticket_type_ids)

                deleted = await self.uow.ticket_repo.delete_expired_pending(now=now)
                for ticket_type_id in sorted(ticket_type_ids):
                    ticket_type = await self.uow.ticket_type_repo.get_by_id(
                        ticket_type_id=ticket_type_id
                    )
                    # Ticket rows may outlive a deleted type
                    if ticket_type:
                        await self.inventory_ledger.recompute(
                            uow=self.uow, ticket_type=ticket_type, now=now
                        )
                expired = await self.uow.purchase_repo.expire_overdue(now=now)
                await self.uow.commit()

            result = ReapResult(
                deleted_tickets=deleted,
                expired_purchases=expired,
                recomputed_ticket_types=len(ticket_type_ids),
            )
            metrics.record_reaper_run(
                result='success', deleted_tickets=deleted, expired_purchases=expired
            )
            if deleted or expired:
                Logger.base.info(
                    f'🧹 [REAPER] Deleted {deleted} expired tickets, expired {expired} purchases, '
                    f'recounted {len(ticket_type_ids)} ticket types'
                )
            return result
