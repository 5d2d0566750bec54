from enum import StrEnum


class PlatformTransactionStatus(StrEnum):
    RECEIVED = 'RECEIVED'
    PENDING_SETTLEMENT = 'PENDING_SETTLEMENT'
    SETTLED = 'SETTLED'


class TransactionLogStatus(StrEnum):
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    FAILED = 'FAILED'
    CANCELLED = 'CANCELLED'


class TransactionType(StrEnum):
    TICKET_PURCHASE = 'TICKET_PURCHASE'
    TICKET_MINT = 'TICKET_MINT'
    SETTLEMENT = 'SETTLEMENT'
    REFUND = 'REFUND'
