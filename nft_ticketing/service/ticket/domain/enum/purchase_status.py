from enum import StrEnum


class PurchaseStatus(StrEnum):
    INITIATED = 'INITIATED'
    CONFIRMED = 'CONFIRMED'
    EXPIRED = 'EXPIRED'
    FAILED = 'FAILED'
