from datetime import datetime, timezone
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import FailedPreconditionError, NotFoundError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase


class FailPurchaseUseCase:
    """INITIATED -> FAILED; the reserved tickets are released in the same transaction."""

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
    async def execute(self, *, purchase_id: str, reason: str) -> Purchase:
        with self.tracer.start_as_current_span(
            'use_case.fail_purchase', attributes={'purchase.id': purchase_id}
        ):
            now = datetime.now(timezone.utc)
            reason = reason.strip() or 'Payment failed'
            async with self.uow:
                purchase = await self.uow.purchase_repo.get_by_id(purchase_id=purchase_id)
                if not purchase:
                    raise NotFoundError(f'Purchase {purchase_id} not found')
                failed = purchase.fail(reason=reason, now=now)

                ticket_type = await self.uow.ticket_type_repo.get_by_id_for_update(
                    ticket_type_id=purchase.ticket_type_id
                )
                if not await self.uow.purchase_repo.fail_if_initiated(
                    purchase_id=purchase_id, reason=reason, now=now
                ):
                    raise FailedPreconditionError(
                        f'Purchase {purchase_id} changed state; cannot mark FAILED'
                    )
                released = await self.uow.ticket_repo.delete_pending_by_purchase(
                    purchase_id=purchase_id
                )
                if ticket_type:
                    await self.inventory_ledger.recompute(
                        uow=self.uow, ticket_type=ticket_type, now=now
                    )
                await self.uow.commit()

            Logger.base.info(
                f'🛑 [PURCHASE] {purchase_id} failed ({reason}); released {released} tickets'
            )
            return failed
