from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import NotFoundError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.dto.settlement_dto import ProcessSettlementResult
from nft_ticketing.service.ticket.domain.entity.platform_transaction_entity import (
    MANUAL_SETTLEMENT,
)


class ProcessEventSettlementUseCase:
    """Mark every RECEIVED platform transaction of an event SETTLED."""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self, *, event_id: str, settlement_transaction_hash: Optional[str] = None
    ) -> ProcessSettlementResult:
        with self.tracer.start_as_current_span(
            'use_case.process_event_settlement', attributes={'event.id': event_id}
        ):
            settlement_hash = (settlement_transaction_hash or '').strip() or MANUAL_SETTLEMENT
            async with self.uow:
                settled = await self.uow.ledger_repo.settle_received(
                    event_id=event_id,
                    settlement_transaction_hash=settlement_hash,
                    now=datetime.now(timezone.utc),
                )
                if not settled:
                    raise NotFoundError(f'No pending transactions to settle for event {event_id}')
                await self.uow.commit()

            organizer_total = sum(int(tx.organizer_amount_wei) for tx in settled)
            Logger.base.info(
                f'💸 [SETTLEMENT] Event {event_id}: settled {len(settled)} transactions, '
                f'{organizer_total} wei to organizer ({settlement_hash})'
            )
            return ProcessSettlementResult(
                event_id=event_id,
                settled_count=len(settled),
                organizer_amount_wei=str(organizer_total),
                settlement_transaction_hash=settlement_hash,
                settled_transaction_ids=[tx.id for tx in settled],
            )
