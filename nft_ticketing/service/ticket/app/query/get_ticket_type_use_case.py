from datetime import datetime, timezone
from typing import List, Optional

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.dto.page_dto import Page, PageRequest
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType


class GetTicketTypeUseCase:
    """
    Ticket type reads.

    Single and per-event/per-session reads recount availability and persist
    it before returning; the paginated listing returns the cached value.
    """

    def __init__(self, uow: AbstractUnitOfWork, inventory_ledger: InventoryLedger):
        self.uow = uow
        self.inventory_ledger = inventory_ledger

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        inventory_ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
    ):
        return cls(uow=uow, inventory_ledger=inventory_ledger)

    async def _refreshed(self, ticket_types: List[TicketType]) -> List[TicketType]:
        now = datetime.now(timezone.utc)
        refreshed = []
        for ticket_type in ticket_types:
            available = await self.inventory_ledger.recompute(
                uow=self.uow, ticket_type=ticket_type, now=now
            )
            refreshed.append(attrs.evolve(ticket_type, available_quantity=available))
        return refreshed

    @Logger.io
    async def get_ticket_type(self, ticket_type_id: str) -> TicketType:
        async with self.uow:
            ticket_type = await self.uow.ticket_type_repo.get_by_id(ticket_type_id=ticket_type_id)
            if not ticket_type:
                raise NotFoundError(f'Ticket type {ticket_type_id} not found')
            [refreshed] = await self._refreshed([ticket_type])
            await self.uow.commit()
        return refreshed

    @Logger.io
    async def get_availability(self, ticket_type_id: str) -> int:
        async with self.uow:
            available = await self.inventory_ledger.recompute_by_id(
                uow=self.uow, ticket_type_id=ticket_type_id
            )
            await self.uow.commit()
        return available

    @Logger.io
    async def list_by_event(self, event_id: str) -> List[TicketType]:
        async with self.uow:
            ticket_types = await self.uow.ticket_type_repo.list_by_event(event_id=event_id)
            refreshed = await self._refreshed(ticket_types)
            await self.uow.commit()
        return refreshed

    @Logger.io
    async def list_by_session(self, session_id: str) -> List[TicketType]:
        async with self.uow:
            ticket_types = await self.uow.ticket_type_repo.list_by_session(session_id=session_id)
            refreshed = await self._refreshed(ticket_types)
            await self.uow.commit()
        return refreshed

    @Logger.io
    async def list_all(
        self,
        page: PageRequest,
        status_filter: Optional[str] = None,
        event_id: Optional[str] = None,
    ) -> Page[TicketType]:
        published = None
        if status_filter:
            match status_filter.lower():
                case 'published':
                    published = True
                case 'draft':
                    published = False
                case _:
                    raise InvalidArgumentError(
                        f'status_filter must be draft or published, got {status_filter!r}'
                    )
        async with self.uow:
            rows = await self.uow.ticket_type_repo.list_all(
                limit=page.fetch_size, offset=page.offset, published=published, event_id=event_id
            )
        return Page.from_rows(rows, page)
