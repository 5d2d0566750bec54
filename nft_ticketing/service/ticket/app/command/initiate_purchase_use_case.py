from datetime import datetime, timezone
import time
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.core_setting import settings
from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import (
    AlreadyExistsError,
    CustomBaseError,
    FailedPreconditionError,
    InvalidArgumentError,
    NotFoundError,
)
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.platform.metrics.ticketing_metrics import metrics
from nft_ticketing.service.ticket.app.dto.purchase_dto import InitiatePurchaseResult
from nft_ticketing.service.ticket.app.interface.i_blockchain_service_client import (
    IBlockchainServiceClient,
)
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket
from nft_ticketing.service.ticket.domain.value_object.chain_format import normalize_wallet_address
from nft_ticketing.service.ticket.domain.value_object.seat_info import SeatInfo


class InitiatePurchaseUseCase:
    """
    Reserve N tickets of a published ticket type for a wallet.

    Flow:
    1. Validate wallet, seats and quantity (no I/O)
    2. Load the ticket type; it must be published on-chain
    3. Fetch payment details from the blockchain service BEFORE any write
    4. One transaction: row-lock the ticket type, recount availability,
       conditional decrement, insert purchase + tickets, recount again, commit
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        blockchain_client: IBlockchainServiceClient,
        inventory_ledger: InventoryLedger,
        expiry_minutes: int = settings.PURCHASE_EXPIRY_MINUTES,
        max_tickets: int = settings.MAX_TICKETS_PER_PURCHASE,
    ) -> None:
        self.uow = uow
        self.blockchain_client = blockchain_client
        self.inventory_ledger = inventory_ledger
        self.expiry_minutes = expiry_minutes
        self.max_tickets = max_tickets
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        blockchain_client: IBlockchainServiceClient = Depends(
            Provide[Container.blockchain_service_client]
        ),
        inventory_ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
    ) -> Self:
        return cls(uow=uow, blockchain_client=blockchain_client, inventory_ledger=inventory_ledger)

    def _resolve_quantity(self, *, quantity: int, seats: List[SeatInfo]) -> int:
        if seats:
            if quantity and quantity != len(seats):
                raise InvalidArgumentError(
                    f'quantity {quantity} does not match {len(seats)} selected seats'
                )
            quantity = len(seats)
        if not 1 <= quantity <= self.max_tickets:
            raise InvalidArgumentError(
                f'quantity must be between 1 and {self.max_tickets}, got {quantity}'
            )
        return quantity

    @Logger.io
    async def execute(
        self,
        *,
        ticket_type_id: str,
        buyer_address: str,
        quantity: int = 0,
        selected_seats: Optional[List[str]] = None,
    ) -> InitiatePurchaseResult:
        started = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.initiate_purchase',
            attributes={'ticket_type.id': ticket_type_id, 'purchase.quantity': quantity},
        ):
            try:
                result = await self._initiate(
                    ticket_type_id=ticket_type_id,
                    buyer_address=buyer_address,
                    quantity=quantity,
                    selected_seats=selected_seats or [],
                )
            except CustomBaseError as e:
                outcome = {
                    FailedPreconditionError: 'sold_out',
                    AlreadyExistsError: 'seat_taken',
                }.get(type(e), 'error')
                metrics.record_purchase(
                    ticket_type_id=ticket_type_id,
                    result=outcome,
                    duration=time.perf_counter() - started,
                )
                raise
            metrics.record_purchase(
                ticket_type_id=ticket_type_id,
                result='success',
                duration=time.perf_counter() - started,
            )
            return result

    async def _initiate(
        self,
        *,
        ticket_type_id: str,
        buyer_address: str,
        quantity: int,
        selected_seats: List[str],
    ) -> InitiatePurchaseResult:
        wallet = normalize_wallet_address(buyer_address)
        seats = SeatInfo.parse_many(selected_seats)
        quantity = self._resolve_quantity(quantity=quantity, seats=seats)

        async with self.uow:
            ticket_type = await self.uow.ticket_type_repo.get_by_id(ticket_type_id=ticket_type_id)
        if not ticket_type:
            raise NotFoundError(f'Ticket type {ticket_type_id} not found')
        if not ticket_type.is_published:
            raise FailedPreconditionError(
                f'Ticket type {ticket_type_id} is not published on the blockchain yet'
            )

        per_ticket_wei = ticket_type.price_wei_int
        total_wei = per_ticket_wei * quantity

        # Collaborator failure here leaves nothing behind
        payment = await self.blockchain_client.get_ticket_payment_details(
            blockchain_event_id=ticket_type.blockchain_event_id,
            price_wei=ticket_type.price_wei,
        )

        now = datetime.now(timezone.utc)
        seat_keys = [seat.seat_key for seat in seats]
        async with self.uow:
            locked = await self.uow.ticket_type_repo.get_by_id_for_update(
                ticket_type_id=ticket_type_id
            )
            if not locked:
                raise NotFoundError(f'Ticket type {ticket_type_id} not found')

            if seat_keys:
                await self.uow.ticket_repo.release_expired_seat_holds(
                    event_id=locked.event_id, seat_keys=seat_keys, now=now
                )
                taken = await self.uow.ticket_repo.find_taken_seats(
                    event_id=locked.event_id, seat_keys=seat_keys
                )
                if taken:
                    raise AlreadyExistsError(f'Seats already taken: {", ".join(taken)}')

            available = await self.inventory_ledger.recompute(
                uow=self.uow, ticket_type=locked, now=now
            )
            reserved = await self.uow.ticket_type_repo.try_reserve(
                ticket_type_id=ticket_type_id, quantity=quantity
            )
            if not reserved:
                raise FailedPreconditionError(
                    f'Not enough tickets available: only {available} available'
                )

            purchase = Purchase.initiate(
                ticket_type_id=locked.id,
                event_id=locked.event_id,
                wallet_address=wallet,
                quantity=quantity,
                selected_seats=seat_keys,
                purchase_details={
                    'payment_contract_address': payment.payment_contract_address,
                    'price_per_ticket_wei': str(per_ticket_wei),
                    'total_price_wei': str(total_wei),
                    'blockchain_event_id': locked.blockchain_event_id,
                    'blockchain_ticket_type_id': locked.blockchain_ticket_type_id,
                    'session_id_for_contract': locked.contract_session_id,
                    'ticket_type_name': locked.name,
                    'event_id': locked.event_id,
                },
                now=now,
                expiry_minutes=self.expiry_minutes,
            )
            await self.uow.purchase_repo.create(purchase=purchase)
            await self.uow.ticket_repo.create_many(
                tickets=[
                    Ticket.reserve(
                        purchase_id=purchase.id,
                        batch_index=index,
                        event_id=locked.event_id,
                        ticket_type_id=locked.id,
                        session_id=locked.session_id,
                        owner_address=wallet,
                        expiry_time=purchase.expires_at,
                        seat_info=seats[index] if seats else None,
                        now=now,
                    )
                    for index in range(quantity)
                ]
            )
            remaining = await self.inventory_ledger.recompute(
                uow=self.uow, ticket_type=locked, now=now
            )
            await self.uow.commit()

        Logger.base.info(
            f'🎟️ [PURCHASE] {purchase.id} reserved {quantity} x {locked.name} '
            f'for {wallet}, {remaining} left'
        )
        return InitiatePurchaseResult(
            purchase_id=purchase.id,
            payment_contract_address=payment.payment_contract_address,
            price_to_pay_wei=str(total_wei),
            blockchain_event_id=locked.blockchain_event_id,
            blockchain_ticket_type_id=locked.blockchain_ticket_type_id,
            session_id_for_contract=locked.contract_session_id,
            expires_at=purchase.expires_at,
        )
