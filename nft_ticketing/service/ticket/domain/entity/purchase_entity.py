from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

import attrs
import uuid_utils

from nft_ticketing.platform.exception.exceptions import FailedPreconditionError
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from nft_ticketing.service.ticket.domain.state_machine import PURCHASE_STATE_MACHINE


@attrs.define
class Purchase:
    id: str
    ticket_type_id: str
    event_id: str
    quantity: int
    wallet_address: str
    expires_at: datetime
    purchase_details: dict[str, Any] = attrs.field(factory=dict)
    selected_seats: List[str] = attrs.field(factory=list)
    metadata_uris: List[str] = attrs.field(factory=list)
    status: PurchaseStatus = PurchaseStatus.INITIATED
    transaction_hash: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def initiate(
        cls,
        *,
        ticket_type_id: str,
        event_id: str,
        wallet_address: str,
        quantity: int,
        selected_seats: List[str],
        purchase_details: dict[str, Any],
        now: datetime,
        expiry_minutes: int,
    ) -> 'Purchase':
        return cls(
            id=str(uuid_utils.uuid7()),
            ticket_type_id=ticket_type_id,
            event_id=event_id,
            quantity=quantity,
            wallet_address=wallet_address,
            selected_seats=list(selected_seats),
            purchase_details=purchase_details,
            status=PurchaseStatus.INITIATED,
            expires_at=now + timedelta(minutes=expiry_minutes),
            created_at=now,
            updated_at=now,
        )

    @property
    def metadata_ready(self) -> bool:
        return len(self.metadata_uris) >= self.quantity

    @property
    def total_price_wei(self) -> int:
        return int(self.purchase_details.get('total_price_wei', 0))

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def ensure_active(self, now: datetime) -> None:
        """INITIATED and not past its reservation window."""
        if self.status != PurchaseStatus.INITIATED:
            raise FailedPreconditionError(
                f'Purchase {self.id} is {self.status.value}; expected INITIATED'
            )
        if self.is_expired(now):
            raise FailedPreconditionError(
                f'Purchase {self.id} reservation expired at {self.expires_at.isoformat()}'
            )

    def confirm(self, *, transaction_hash: str, now: datetime) -> 'Purchase':
        PURCHASE_STATE_MACHINE.ensure(self.status, PurchaseStatus.CONFIRMED)
        if not self.metadata_ready:
            raise FailedPreconditionError(
                f'Purchase {self.id} metadata not prepared '
                f'({len(self.metadata_uris)}/{self.quantity} URIs)'
            )
        return attrs.evolve(
            self,
            status=PurchaseStatus.CONFIRMED,
            transaction_hash=transaction_hash,
            updated_at=now,
        )

    def fail(self, *, reason: str, now: datetime) -> 'Purchase':
        PURCHASE_STATE_MACHINE.ensure(self.status, PurchaseStatus.FAILED)
        return attrs.evolve(
            self, status=PurchaseStatus.FAILED, failure_reason=reason, updated_at=now
        )

    def expire(self, *, now: datetime) -> 'Purchase':
        PURCHASE_STATE_MACHINE.ensure(self.status, PurchaseStatus.EXPIRED)
        return attrs.evolve(self, status=PurchaseStatus.EXPIRED, updated_at=now)
