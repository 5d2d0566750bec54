from datetime import datetime, timezone
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import (
    FailedPreconditionError,
    InvalidArgumentError,
    NotFoundError,
)
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.dto.purchase_dto import PrepareMetadataResult
from nft_ticketing.service.ticket.app.interface.i_event_service_client import IEventServiceClient
from nft_ticketing.service.ticket.app.interface.i_ipfs_service_client import IIpfsServiceClient
from nft_ticketing.service.ticket.app.service.nft_metadata_builder import NftMetadataBuilder
from nft_ticketing.service.ticket.domain.value_object.seat_info import SeatInfo


class PrepareMetadataUseCase:
    """
    Pin one metadata document per reserved ticket and store the ``ipfs://`` URIs.

    Idempotent: once every ticket has a URI the stored list is returned and
    nothing is pinned again. A pinning failure stores nothing.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        event_client: IEventServiceClient,
        ipfs_client: IIpfsServiceClient,
        metadata_builder: NftMetadataBuilder,
    ) -> None:
        self.uow = uow
        self.event_client = event_client
        self.ipfs_client = ipfs_client
        self.metadata_builder = metadata_builder
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        event_client: IEventServiceClient = Depends(Provide[Container.event_service_client]),
        ipfs_client: IIpfsServiceClient = Depends(Provide[Container.ipfs_service_client]),
        metadata_builder: NftMetadataBuilder = Depends(Provide[Container.nft_metadata_builder]),
    ) -> Self:
        return cls(
            uow=uow,
            event_client=event_client,
            ipfs_client=ipfs_client,
            metadata_builder=metadata_builder,
        )

    @Logger.io
    async def execute(
        self,
        *,
        purchase_id: str,
        quantity: int = 0,
        selected_seats: Optional[List[str]] = None,
    ) -> PrepareMetadataResult:
        with self.tracer.start_as_current_span(
            'use_case.prepare_metadata', attributes={'purchase.id': purchase_id}
        ):
            async with self.uow:
                purchase = await self.uow.purchase_repo.get_by_id(purchase_id=purchase_id)
                ticket_type = (
                    await self.uow.ticket_type_repo.get_by_id(
                        ticket_type_id=purchase.ticket_type_id
                    )
                    if purchase
                    else None
                )
            if not purchase:
                raise NotFoundError(f'Purchase {purchase_id} not found')

            purchase.ensure_active(datetime.now(timezone.utc))
            if quantity and quantity != purchase.quantity:
                raise InvalidArgumentError(
                    f'quantity {quantity} does not match purchase quantity {purchase.quantity}'
                )
            if selected_seats:
                requested = [seat.seat_key for seat in SeatInfo.parse_many(selected_seats)]
                if requested != purchase.selected_seats:
                    raise InvalidArgumentError('selected_seats do not match the reserved seats')

            if purchase.metadata_ready:
                return PrepareMetadataResult(
                    purchase_id=purchase.id, metadata_uris=list(purchase.metadata_uris)
                )
            if not ticket_type:
                raise NotFoundError(f'Ticket type {purchase.ticket_type_id} not found')

            event = await self.event_client.get_event(event_id=purchase.event_id)
            seats = [SeatInfo.parse(key) for key in purchase.selected_seats]

            uris = []
            for index in range(purchase.quantity):
                document = self.metadata_builder.build(
                    event=event,
                    ticket_type=ticket_type,
                    purchase=purchase,
                    index=index,
                    seat=seats[index] if index < len(seats) else None,
                )
                cid = await self.ipfs_client.pin_json(
                    content=document,
                    name=self.metadata_builder.pin_name(purchase=purchase, index=index),
                )
                uris.append(f'ipfs://{cid}')

            async with self.uow:
                current = await self.uow.purchase_repo.get_by_id(purchase_id=purchase_id)
                if not current:
                    raise NotFoundError(f'Purchase {purchase_id} not found')
                if current.metadata_ready:
                    # A concurrent call finished first; keep its URIs
                    return PrepareMetadataResult(
                        purchase_id=current.id, metadata_uris=list(current.metadata_uris)
                    )
                current.ensure_active(datetime.now(timezone.utc))
                if not await self.uow.purchase_repo.update_metadata_uris(
                    purchase_id=purchase_id, metadata_uris=uris
                ):
                    raise FailedPreconditionError(
                        f'Purchase {purchase_id} is no longer INITIATED'
                    )
                await self.uow.commit()

            Logger.base.info(f'📦 [METADATA] Pinned {len(uris)} documents for purchase {purchase_id}')
            return PrepareMetadataResult(purchase_id=purchase_id, metadata_uris=uris)
