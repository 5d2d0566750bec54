from datetime import datetime
from typing import Optional

import attrs
import uuid_utils

from nft_ticketing.service.ticket.domain.enum.ledger_status import PlatformTransactionStatus
from nft_ticketing.service.ticket.domain.value_object.fee_split import FeeSplit


MANUAL_SETTLEMENT = 'MANUAL_SETTLEMENT'


@attrs.define
class PlatformTransaction:
    """Buyer payment held by the platform until settled to the organizer."""

    id: str
    transaction_hash: str
    purchase_id: str
    event_id: str
    buyer_address: str
    amount_wei: str
    platform_fee_wei: str
    organizer_amount_wei: str
    platform_fee_percent: int
    event_organizer_id: str = ''
    status: PlatformTransactionStatus = PlatformTransactionStatus.RECEIVED
    settled_at: Optional[datetime] = None
    settlement_transaction_hash: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def received(
        cls,
        *,
        transaction_hash: str,
        purchase_id: str,
        event_id: str,
        event_organizer_id: str,
        buyer_address: str,
        split: FeeSplit,
        now: datetime,
    ) -> 'PlatformTransaction':
        return cls(
            id=str(uuid_utils.uuid7()),
            transaction_hash=transaction_hash,
            purchase_id=purchase_id,
            event_id=event_id,
            event_organizer_id=event_organizer_id,
            buyer_address=buyer_address,
            amount_wei=str(split.amount_wei),
            platform_fee_wei=str(split.platform_fee_wei),
            organizer_amount_wei=str(split.organizer_amount_wei),
            platform_fee_percent=split.fee_percent,
            status=PlatformTransactionStatus.RECEIVED,
            created_at=now,
        )
