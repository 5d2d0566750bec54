from datetime import datetime, timezone
from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.dto.page_dto import Page, PageRequest
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket
from nft_ticketing.service.ticket.domain.enum.ticket_status import TicketStatus
from nft_ticketing.service.ticket.domain.value_object.chain_format import normalize_wallet_address


class ListTicketsUseCase:
    """Read projections over tickets; every list is offset paginated."""

    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])):
        return cls(uow=uow)

    @Logger.io
    async def get_ticket(self, ticket_id: str) -> Ticket:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
        if not ticket:
            raise NotFoundError(f'Ticket {ticket_id} not found')
        return ticket

    @Logger.io
    async def list_by_event(self, event_id: str, page: PageRequest) -> Page[Ticket]:
        async with self.uow:
            rows = await self.uow.ticket_repo.list_by_event(
                event_id=event_id, limit=page.fetch_size, offset=page.offset
            )
        return Page.from_rows(rows, page)

    @Logger.io
    async def list_by_owner(self, owner_address: str, page: PageRequest) -> Page[Ticket]:
        owner = normalize_wallet_address(owner_address)
        async with self.uow:
            rows = await self.uow.ticket_repo.list_by_owner(
                owner_address=owner, limit=page.fetch_size, offset=page.offset
            )
        return Page.from_rows(rows, page)

    @Logger.io
    async def list_all(self, page: PageRequest, status: Optional[str] = None) -> Page[Ticket]:
        status_filter = None
        if status:
            try:
                status_filter = TicketStatus(status.upper())
            except ValueError:
                raise InvalidArgumentError(f'Unknown ticket status: {status}')
        async with self.uow:
            rows = await self.uow.ticket_repo.list_all(
                limit=page.fetch_size, offset=page.offset, status=status_filter
            )
        return Page.from_rows(rows, page)

    @Logger.io
    async def list_sold_seats(self, event_id: str, page: PageRequest) -> Page[str]:
        """Seat keys that are sold or held by an unexpired reservation."""
        async with self.uow:
            seat_keys = await self.uow.ticket_repo.list_sold_seat_keys(
                event_id=event_id, now=datetime.now(timezone.utc)
            )
        return Page.from_rows(seat_keys[page.offset : page.offset + page.fetch_size], page)
