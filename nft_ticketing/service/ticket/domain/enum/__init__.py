"""Ticket Domain Enums"""

from nft_ticketing.service.ticket.domain.enum.ledger_status import (
    PlatformTransactionStatus,
    TransactionLogStatus,
    TransactionType,
)
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from nft_ticketing.service.ticket.domain.enum.ticket_status import CheckInStatus, TicketStatus

__all__ = [
    'CheckInStatus',
    'PlatformTransactionStatus',
    'PurchaseStatus',
    'TicketStatus',
    'TransactionLogStatus',
    'TransactionType',
]
