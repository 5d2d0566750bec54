from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nft_ticketing.platform.database.datetime_util import as_utc
from nft_ticketing.platform.exception.exceptions import FailedPreconditionError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.interface.i_purchase_repo import IPurchaseRepo
from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from nft_ticketing.service.ticket.driven_adapter.model.purchase_model import PurchaseModel


class PurchaseRepoImpl(IPurchaseRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_purchase: PurchaseModel) -> Purchase:
        return Purchase(
            id=db_purchase.id,
            ticket_type_id=db_purchase.ticket_type_id,
            event_id=db_purchase.event_id,
            quantity=db_purchase.quantity,
            wallet_address=db_purchase.wallet_address,
            selected_seats=list(db_purchase.selected_seats or []),
            status=PurchaseStatus(db_purchase.status),
            expires_at=as_utc(db_purchase.expires_at),  # type: ignore[arg-type]
            purchase_details=dict(db_purchase.purchase_details or {}),
            metadata_uris=list(db_purchase.metadata_uris or []),
            transaction_hash=db_purchase.transaction_hash,
            failure_reason=db_purchase.failure_reason,
            created_at=as_utc(db_purchase.created_at),
            updated_at=as_utc(db_purchase.updated_at),
        )

    @Logger.io
    async def create(self, *, purchase: Purchase) -> Purchase:
        self.session.add(
            PurchaseModel(
                id=purchase.id,
                ticket_type_id=purchase.ticket_type_id,
                event_id=purchase.event_id,
                quantity=purchase.quantity,
                wallet_address=purchase.wallet_address,
                selected_seats=list(purchase.selected_seats),
                status=purchase.status.value,
                expires_at=purchase.expires_at,
                purchase_details=purchase.purchase_details,
                metadata_uris=list(purchase.metadata_uris),
                transaction_hash=purchase.transaction_hash,
                failure_reason=purchase.failure_reason,
                created_at=purchase.created_at,
                updated_at=purchase.updated_at,
            )
        )
        await self.session.flush()
        return purchase

    @Logger.io
    async def get_by_id(self, *, purchase_id: str) -> Optional[Purchase]:
        result = await self.session.execute(
            select(PurchaseModel)
            .where(PurchaseModel.id == purchase_id)
            .execution_options(populate_existing=True)
        )
        db_purchase = result.scalar_one_or_none()
        return self._to_entity(db_purchase) if db_purchase else None

    @Logger.io
    async def get_by_transaction_hash(self, *, transaction_hash: str) -> Optional[Purchase]:
        result = await self.session.execute(
            select(PurchaseModel).where(PurchaseModel.transaction_hash == transaction_hash)
        )
        db_purchase = result.scalar_one_or_none()
        return self._to_entity(db_purchase) if db_purchase else None

    @Logger.io
    async def update_metadata_uris(self, *, purchase_id: str, metadata_uris: List[str]) -> bool:
        result = await self.session.execute(
            update(PurchaseModel)
            .execution_options(synchronize_session=False)
            .where(
                PurchaseModel.id == purchase_id,
                PurchaseModel.status == PurchaseStatus.INITIATED.value,
            )
            .values(metadata_uris=list(metadata_uris), updated_at=datetime.now(timezone.utc))
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def confirm_if_initiated(
        self, *, purchase_id: str, transaction_hash: str, now: datetime
    ) -> bool:
        try:
            result = await self.session.execute(
                update(PurchaseModel)
                .execution_options(synchronize_session=False)
                .where(
                    PurchaseModel.id == purchase_id,
                    PurchaseModel.status == PurchaseStatus.INITIATED.value,
                )
                .values(
                    status=PurchaseStatus.CONFIRMED.value,
                    transaction_hash=transaction_hash,
                    updated_at=now,
                )
            )
        except IntegrityError:
            raise FailedPreconditionError(
                f'Transaction {transaction_hash} is already used by another purchase'
            )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def fail_if_initiated(self, *, purchase_id: str, reason: str, now: datetime) -> bool:
        result = await self.session.execute(
            update(PurchaseModel)
            .execution_options(synchronize_session=False)
            .where(
                PurchaseModel.id == purchase_id,
                PurchaseModel.status == PurchaseStatus.INITIATED.value,
            )
            .values(status=PurchaseStatus.FAILED.value, failure_reason=reason, updated_at=now)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def expire_overdue(self, *, now: datetime) -> int:
        result = await self.session.execute(
            update(PurchaseModel)
            .execution_options(synchronize_session=False)
            .where(
                PurchaseModel.status == PurchaseStatus.INITIATED.value,
                PurchaseModel.expires_at < now,
            )
            .values(status=PurchaseStatus.EXPIRED.value, updated_at=now)
        )
        return result.rowcount  # type: ignore[attr-defined]
