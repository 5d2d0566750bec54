from typing import List, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import InvalidArgumentError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.dto.page_dto import Page, PageRequest
from nft_ticketing.service.ticket.app.dto.settlement_dto import SettlementBucket, SettlementSummary
from nft_ticketing.service.ticket.domain.entity.platform_transaction_entity import (
    PlatformTransaction,
)
from nft_ticketing.service.ticket.domain.entity.transaction_log_entity import TransactionLog
from nft_ticketing.service.ticket.domain.enum.ledger_status import PlatformTransactionStatus


def _bucket(transactions: List[PlatformTransaction]) -> SettlementBucket:
    return SettlementBucket(
        count=len(transactions),
        amount_wei=str(sum(int(tx.amount_wei) for tx in transactions)),
        platform_fee_wei=str(sum(int(tx.platform_fee_wei) for tx in transactions)),
        organizer_amount_wei=str(sum(int(tx.organizer_amount_wei) for tx in transactions)),
    )


class GetSettlementUseCase:
    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])):
        return cls(uow=uow)

    @Logger.io
    async def get_summary(self, event_id: str) -> SettlementSummary:
        async with self.uow:
            transactions = await self.uow.ledger_repo.list_platform_transactions(
                event_ids=[event_id]
            )
        # Wei amounts exceed 64 bits, so totals are summed here rather than in SQL
        return SettlementSummary(
            event_id=event_id,
            received=_bucket(
                [tx for tx in transactions if tx.status == PlatformTransactionStatus.RECEIVED]
            ),
            settled=_bucket(
                [tx for tx in transactions if tx.status == PlatformTransactionStatus.SETTLED]
            ),
        )

    @Logger.io
    async def list_platform_transactions(
        self, page: PageRequest, event_id: Optional[str] = None, status: Optional[str] = None
    ) -> Page[PlatformTransaction]:
        status_filter = None
        if status:
            try:
                status_filter = PlatformTransactionStatus(status.upper())
            except ValueError:
                raise InvalidArgumentError(f'Unknown platform transaction status: {status}')
        async with self.uow:
            rows = await self.uow.ledger_repo.list_platform_transactions(
                event_ids=[event_id] if event_id else None,
                status=status_filter,
                limit=page.fetch_size,
                offset=page.offset,
            )
        return Page.from_rows(rows, page)

    @Logger.io
    async def list_transaction_logs(
        self, page: PageRequest, event_id: Optional[str] = None
    ) -> Page[TransactionLog]:
        async with self.uow:
            rows = await self.uow.ledger_repo.list_transaction_logs(
                event_id=event_id, limit=page.fetch_size, offset=page.offset
            )
        return Page.from_rows(rows, page)
