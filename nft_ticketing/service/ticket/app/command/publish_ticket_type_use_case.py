from typing import Self

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
from nft_ticketing.service.ticket.app.interface.i_blockchain_service_client import (
    IBlockchainServiceClient,
)
from nft_ticketing.service.ticket.app.interface.i_event_service_client import IEventServiceClient
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType


class PublishTicketTypeUseCase:
    """
    Register a draft ticket type on-chain and store the returned ids.

    The registration call runs outside any transaction; the ticket type row is
    re-read under lock before the ids are written.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        event_client: IEventServiceClient,
        blockchain_client: IBlockchainServiceClient,
    ) -> None:
        self.uow = uow
        self.event_client = event_client
        self.blockchain_client = blockchain_client
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        event_client: IEventServiceClient = Depends(Provide[Container.event_service_client]),
        blockchain_client: IBlockchainServiceClient = Depends(
            Provide[Container.blockchain_service_client]
        ),
    ) -> Self:
        return cls(uow=uow, event_client=event_client, blockchain_client=blockchain_client)

    @Logger.io
    async def execute(self, *, ticket_type_id: str) -> TicketType:
        with self.tracer.start_as_current_span(
            'use_case.publish_ticket_type', attributes={'ticket_type.id': ticket_type_id}
        ):
            async with self.uow:
                ticket_type = await self.uow.ticket_type_repo.get_by_id(
                    ticket_type_id=ticket_type_id
                )
            if not ticket_type:
                raise NotFoundError(f'Ticket type {ticket_type_id} not found')
            if ticket_type.blockchain_ticket_type_id:
                raise AlreadyExistsError(f'Ticket type {ticket_type_id} is already published')

            blockchain_event_id = ticket_type.blockchain_event_id
            if not blockchain_event_id:
                event = await self.event_client.get_event(event_id=ticket_type.event_id)
                blockchain_event_id = event.blockchain_event_id
            if not blockchain_event_id:
                raise FailedPreconditionError(
                    f'Event {ticket_type.event_id} is not published on the blockchain yet'
                )

            registered = await self.blockchain_client.register_ticket_type(
                blockchain_event_id=blockchain_event_id,
                name=ticket_type.name,
                price_wei=ticket_type.price_wei,
                total_supply=ticket_type.total_quantity,
            )

            async with self.uow:
                locked = await self.uow.ticket_type_repo.get_by_id_for_update(
                    ticket_type_id=ticket_type_id
                )
                if not locked:
                    raise NotFoundError(f'Ticket type {ticket_type_id} not found')
                published = locked.publish(
                    blockchain_event_id=blockchain_event_id,
                    blockchain_ticket_type_id=registered.blockchain_ticket_type_id,
                )
                await self.uow.ticket_type_repo.update(ticket_type=published)
                await self.uow.commit()

            Logger.base.info(
                f'⛓️ [TICKET_TYPE] Published {published.name} as on-chain type '
                f'{published.blockchain_ticket_type_id} (tx {registered.transaction_hash})'
            )
            return published
