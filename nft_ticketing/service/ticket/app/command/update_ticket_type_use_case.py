from datetime import datetime, timezone
from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import AlreadyExistsError, NotFoundError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType


class UpdateTicketTypeUseCase:
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
    async def execute(
        self,
        *,
        ticket_type_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        total_quantity: Optional[int] = None,
        price_wei: Optional[str] = None,
        blockchain_event_id: Optional[str] = None,
    ) -> TicketType:
        with self.tracer.start_as_current_span(
            'use_case.update_ticket_type', attributes={'ticket_type.id': ticket_type_id}
        ):
            now = datetime.now(timezone.utc)
            async with self.uow:
                ticket_type = await self.uow.ticket_type_repo.get_by_id_for_update(
                    ticket_type_id=ticket_type_id
                )
                if not ticket_type:
                    raise NotFoundError(f'Ticket type {ticket_type_id} not found')

                committed = await self.inventory_ledger.committed_count(
                    uow=self.uow, ticket_type_id=ticket_type_id, now=now
                )
                updated = ticket_type.update(
                    name=name,
                    description=description,
                    total_quantity=total_quantity,
                    price_wei=price_wei,
                    blockchain_event_id=blockchain_event_id,
                    committed_count=committed,
                )
                name_taken = updated.name != ticket_type.name and (
                    await self.uow.ticket_type_repo.exists_by_event_and_name(
                        event_id=updated.event_id, name=updated.name, exclude_id=updated.id
                    )
                )
                if name_taken:
                    raise AlreadyExistsError(
                        f'Ticket type {updated.name!r} already exists for event {updated.event_id}'
                    )

                await self.uow.ticket_type_repo.update(ticket_type=updated)
                available = await self.inventory_ledger.recompute(
                    uow=self.uow, ticket_type=updated, now=now
                )
                await self.uow.commit()

            return attrs.evolve(updated, available_quantity=available)
