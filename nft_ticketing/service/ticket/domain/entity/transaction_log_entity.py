from datetime import datetime
from typing import Any, List, Optional

import attrs
import uuid_utils

from nft_ticketing.service.ticket.domain.enum.ledger_status import (
    TransactionLogStatus,
    TransactionType,
)
from nft_ticketing.service.ticket.domain.value_object.fee_split import FeeSplit


@attrs.define
class TransactionLog:
    """Audit entry for a money movement on-chain."""

    id: str
    transaction_hash: str
    type: TransactionType
    status: TransactionLogStatus
    event_id: str
    amount_wei: str
    platform_fee_wei: str
    organizer_amount_wei: str
    fee_percent_at_time: int
    from_address: str
    to_address: str = ''
    organizer_id: str = ''
    ticket_type_id: str = ''
    block_number: Optional[int] = None
    related_purchase_id: Optional[str] = None
    related_ticket_ids: List[str] = attrs.field(factory=list)
    metadata: dict[str, Any] = attrs.field(factory=dict)
    description: str = ''
    failure_reason: str = ''
    processed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def for_purchase(
        cls,
        *,
        transaction_hash: str,
        purchase_id: str,
        event_id: str,
        organizer_id: str,
        ticket_type_id: str,
        buyer_address: str,
        to_address: str,
        block_number: Optional[int],
        ticket_ids: List[str],
        split: FeeSplit,
        metadata: dict[str, Any],
        now: datetime,
    ) -> 'TransactionLog':
        return cls(
            id=str(uuid_utils.uuid7()),
            transaction_hash=transaction_hash,
            block_number=block_number,
            type=TransactionType.TICKET_PURCHASE,
            status=TransactionLogStatus.CONFIRMED,
            event_id=event_id,
            organizer_id=organizer_id,
            ticket_type_id=ticket_type_id,
            amount_wei=str(split.amount_wei),
            platform_fee_wei=str(split.platform_fee_wei),
            organizer_amount_wei=str(split.organizer_amount_wei),
            fee_percent_at_time=split.fee_percent,
            from_address=buyer_address,
            to_address=to_address,
            related_purchase_id=purchase_id,
            related_ticket_ids=list(ticket_ids),
            metadata=metadata,
            description=f'Purchase of {len(ticket_ids)} ticket(s) for event {event_id}',
            processed_at=now,
            created_at=now,
        )
