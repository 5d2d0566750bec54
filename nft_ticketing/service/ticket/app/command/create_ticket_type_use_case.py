from typing import Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import (
    AlreadyExistsError,
    FailedPreconditionError,
    NotFoundError,
)
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.interface.i_event_service_client import IEventServiceClient
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType


class CreateTicketTypeUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork, event_client: IEventServiceClient) -> None:
        self.uow = uow
        self.event_client = event_client
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        event_client: IEventServiceClient = Depends(Provide[Container.event_service_client]),
    ) -> Self:
        return cls(uow=uow, event_client=event_client)

    @Logger.io
    async def execute(
        self,
        *,
        event_id: str,
        session_id: str,
        name: str,
        total_quantity: int,
        price_wei: str,
        description: str = '',
    ) -> TicketType:
        with self.tracer.start_as_current_span(
            'use_case.create_ticket_type', attributes={'event.id': event_id}
        ):
            # Field validation first, no I/O
            draft = TicketType.create(
                event_id=event_id,
                session_id=session_id,
                contract_session_id='',
                name=name,
                total_quantity=total_quantity,
                price_wei=price_wei,
                description=description,
            )

            event = await self.event_client.get_event(event_id=event_id)
            session = event.find_session(session_id)
            if not session:
                raise NotFoundError(f'Session {session_id} not found in event {event_id}')
            if not session.contract_session_id:
                raise FailedPreconditionError(
                    f'Session {session_id} has no contract session id; publish the event first'
                )

            ticket_type = attrs.evolve(
                draft,
                contract_session_id=session.contract_session_id,
                blockchain_event_id=event.blockchain_event_id,
            )
            async with self.uow:
                if await self.uow.ticket_type_repo.exists_by_event_and_name(
                    event_id=event_id, name=ticket_type.name
                ):
                    raise AlreadyExistsError(
                        f'Ticket type {ticket_type.name!r} already exists for event {event_id}'
                    )
                created = await self.uow.ticket_type_repo.create(ticket_type=ticket_type)
                await self.uow.commit()

            Logger.base.info(
                f'🏷️ [TICKET_TYPE] Created {created.name} ({created.total_quantity}) for event {event_id}'
            )
            return created
