from datetime import datetime
from typing import List, Optional

import attrs
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nft_ticketing.platform.database.datetime_util import as_utc
from nft_ticketing.platform.exception.exceptions import AlreadyExistsError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.interface.i_ledger_repo import ILedgerRepo
from nft_ticketing.service.ticket.domain.entity.platform_transaction_entity import (
    PlatformTransaction,
)
from nft_ticketing.service.ticket.domain.entity.transaction_log_entity import TransactionLog
from nft_ticketing.service.ticket.domain.enum.ledger_status import (
    PlatformTransactionStatus,
    TransactionLogStatus,
    TransactionType,
)
from nft_ticketing.service.ticket.driven_adapter.model.platform_transaction_model import (
    PlatformTransactionModel,
)
from nft_ticketing.service.ticket.driven_adapter.model.transaction_log_model import (
    TransactionLogModel,
)


class LedgerRepoImpl(ILedgerRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_platform_transaction(db_tx: PlatformTransactionModel) -> PlatformTransaction:
        return PlatformTransaction(
            id=db_tx.id,
            transaction_hash=db_tx.transaction_hash,
            purchase_id=db_tx.purchase_id,
            event_id=db_tx.event_id,
            event_organizer_id=db_tx.event_organizer_id,
            buyer_address=db_tx.buyer_address,
            amount_wei=db_tx.amount_wei,
            platform_fee_wei=db_tx.platform_fee_wei,
            organizer_amount_wei=db_tx.organizer_amount_wei,
            platform_fee_percent=db_tx.platform_fee_percent,
            status=PlatformTransactionStatus(db_tx.status),
            settled_at=as_utc(db_tx.settled_at),
            settlement_transaction_hash=db_tx.settlement_transaction_hash,
            created_at=as_utc(db_tx.created_at),
        )

    @staticmethod
    def _to_transaction_log(db_log: TransactionLogModel) -> TransactionLog:
        return TransactionLog(
            id=db_log.id,
            transaction_hash=db_log.transaction_hash,
            block_number=db_log.block_number,
            type=TransactionType(db_log.type),
            status=TransactionLogStatus(db_log.status),
            event_id=db_log.event_id,
            organizer_id=db_log.organizer_id,
            ticket_type_id=db_log.ticket_type_id,
            amount_wei=db_log.amount_wei,
            platform_fee_wei=db_log.platform_fee_wei,
            organizer_amount_wei=db_log.organizer_amount_wei,
            fee_percent_at_time=db_log.fee_percent_at_time,
            from_address=db_log.from_address,
            to_address=db_log.to_address,
            related_purchase_id=db_log.related_purchase_id,
            related_ticket_ids=list(db_log.related_ticket_ids or []),
            metadata=dict(db_log.metadata_ or {}),
            description=db_log.description,
            failure_reason=db_log.failure_reason,
            processed_at=as_utc(db_log.processed_at),
            created_at=as_utc(db_log.created_at),
        )

    @Logger.io
    async def add_transaction_log(self, *, log: TransactionLog) -> TransactionLog:
        self.session.add(
            TransactionLogModel(
                id=log.id,
                transaction_hash=log.transaction_hash,
                block_number=log.block_number,
                type=log.type.value,
                status=log.status.value,
                event_id=log.event_id,
                organizer_id=log.organizer_id,
                ticket_type_id=log.ticket_type_id,
                amount_wei=log.amount_wei,
                platform_fee_wei=log.platform_fee_wei,
                organizer_amount_wei=log.organizer_amount_wei,
                fee_percent_at_time=log.fee_percent_at_time,
                from_address=log.from_address,
                to_address=log.to_address,
                related_purchase_id=log.related_purchase_id,
                related_ticket_ids=list(log.related_ticket_ids),
                metadata_=log.metadata,
                description=log.description,
                failure_reason=log.failure_reason,
                processed_at=log.processed_at,
                created_at=log.created_at,
            )
        )
        try:
            await self.session.flush()
        except IntegrityError:
            raise AlreadyExistsError(
                f'Transaction log for purchase {log.related_purchase_id} already exists'
            )
        return log

    @Logger.io
    async def add_platform_transaction(
        self, *, platform_transaction: PlatformTransaction
    ) -> PlatformTransaction:
        self.session.add(
            PlatformTransactionModel(
                id=platform_transaction.id,
                transaction_hash=platform_transaction.transaction_hash,
                purchase_id=platform_transaction.purchase_id,
                event_id=platform_transaction.event_id,
                event_organizer_id=platform_transaction.event_organizer_id,
                buyer_address=platform_transaction.buyer_address,
                amount_wei=platform_transaction.amount_wei,
                platform_fee_wei=platform_transaction.platform_fee_wei,
                organizer_amount_wei=platform_transaction.organizer_amount_wei,
                platform_fee_percent=platform_transaction.platform_fee_percent,
                status=platform_transaction.status.value,
                settled_at=platform_transaction.settled_at,
                settlement_transaction_hash=platform_transaction.settlement_transaction_hash,
                created_at=platform_transaction.created_at,
            )
        )
        try:
            await self.session.flush()
        except IntegrityError:
            raise AlreadyExistsError(
                f'Platform transaction {platform_transaction.transaction_hash} already recorded'
            )
        return platform_transaction

    @Logger.io
    async def list_platform_transactions(
        self,
        *,
        event_ids: Optional[List[str]] = None,
        status: Optional[PlatformTransactionStatus] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[PlatformTransaction]:
        stmt = select(PlatformTransactionModel)
        if event_ids is not None:
            stmt = stmt.where(PlatformTransactionModel.event_id.in_(event_ids))
        if status is not None:
            stmt = stmt.where(PlatformTransactionModel.status == status.value)
        if created_from is not None:
            stmt = stmt.where(PlatformTransactionModel.created_at >= created_from)
        if created_to is not None:
            stmt = stmt.where(PlatformTransactionModel.created_at <= created_to)
        stmt = stmt.order_by(
            PlatformTransactionModel.created_at.desc(), PlatformTransactionModel.id.desc()
        ).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_platform_transaction(row) for row in result.scalars().all()]

    @Logger.io
    async def settle_received(
        self, *, event_id: str, settlement_transaction_hash: str, now: datetime
    ) -> List[PlatformTransaction]:
        pending = await self.list_platform_transactions(
            event_ids=[event_id], status=PlatformTransactionStatus.RECEIVED
        )
        if not pending:
            return []

        ids = [tx.id for tx in pending]
        await self.session.execute(
            update(PlatformTransactionModel)
            .execution_options(synchronize_session=False)
            .where(
                PlatformTransactionModel.id.in_(ids),
                PlatformTransactionModel.status == PlatformTransactionStatus.RECEIVED.value,
            )
            .values(
                status=PlatformTransactionStatus.SETTLED.value,
                settled_at=now,
                settlement_transaction_hash=settlement_transaction_hash,
            )
        )
        return [
            attrs.evolve(
                tx,
                status=PlatformTransactionStatus.SETTLED,
                settled_at=now,
                settlement_transaction_hash=settlement_transaction_hash,
            )
            for tx in pending
        ]

    @Logger.io
    async def list_transaction_logs(
        self, *, event_id: Optional[str] = None, limit: int, offset: int
    ) -> List[TransactionLog]:
        stmt = select(TransactionLogModel)
        if event_id:
            stmt = stmt.where(TransactionLogModel.event_id == event_id)
        result = await self.session.execute(
            stmt.order_by(TransactionLogModel.created_at.desc(), TransactionLogModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._to_transaction_log(row) for row in result.scalars().all()]
