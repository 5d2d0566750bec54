from enum import StrEnum


class TicketStatus(StrEnum):
    PENDING_PAYMENT = 'PENDING_PAYMENT'
    PAID = 'PAID'
    MINTING = 'MINTING'
    MINTED = 'MINTED'

    # Historical values still present in old rows; never produced
    AVAILABLE = 'AVAILABLE'
    SOLD = 'SOLD'
    USED = 'USED'
    CANCELLED = 'CANCELLED'
    PENDING_MINT = 'PENDING_MINT'


# Statuses that hold capacity (and a seat) until they expire
RESERVING_STATUSES: tuple[TicketStatus, ...] = (
    TicketStatus.PENDING_PAYMENT,
    TicketStatus.PAID,
    TicketStatus.MINTING,
)

# Statuses that occupy a seat key
SEAT_HOLDING_STATUSES: tuple[TicketStatus, ...] = (*RESERVING_STATUSES, TicketStatus.MINTED)

SOLD_STATUSES: tuple[TicketStatus, ...] = (
    TicketStatus.PAID,
    TicketStatus.MINTING,
    TicketStatus.MINTED,
)


class CheckInStatus(StrEnum):
    NOT_CHECKED_IN = 'NOT_CHECKED_IN'
    CHECKED_IN = 'CHECKED_IN'
