from datetime import datetime, timezone
from typing import Optional

from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import NotFoundError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.platform.metrics.ticketing_metrics import metrics
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType


class InventoryLedger:
    """
    Availability is always a full recount, never a running delta:

        available = max(0, total - MINTED - unexpired PENDING_PAYMENT/PAID/MINTING)

    Callers run it inside their own unit of work, after the status change and
    before commit, so the cached ``available_quantity`` never drifts.
    """

    @Logger.io
    async def recompute(
        self,
        *,
        uow: AbstractUnitOfWork,
        ticket_type: TicketType,
        now: Optional[datetime] = None,
    ) -> int:
        minted, reserved = await uow.ticket_repo.count_for_availability(
            ticket_type_id=ticket_type.id, now=now or datetime.now(timezone.utc)
        )
        available = ticket_type.compute_availability(
            minted_count=minted, active_reservation_count=reserved
        )
        await uow.ticket_type_repo.set_available_quantity(
            ticket_type_id=ticket_type.id, available_quantity=available
        )
        metrics.update_availability(ticket_type_id=ticket_type.id, available=available)
        return available

    @Logger.io
    async def recompute_by_id(
        self, *, uow: AbstractUnitOfWork, ticket_type_id: str, now: Optional[datetime] = None
    ) -> int:
        ticket_type = await uow.ticket_type_repo.get_by_id(ticket_type_id=ticket_type_id)
        if not ticket_type:
            raise NotFoundError(f'Ticket type {ticket_type_id} not found')
        return await self.recompute(uow=uow, ticket_type=ticket_type, now=now)

    async def committed_count(
        self, *, uow: AbstractUnitOfWork, ticket_type_id: str, now: Optional[datetime] = None
    ) -> int:
        """Minted plus still-held tickets."""
        minted, reserved = await uow.ticket_repo.count_for_availability(
            ticket_type_id=ticket_type_id, now=now or datetime.now(timezone.utc)
        )
        return minted + reserved
