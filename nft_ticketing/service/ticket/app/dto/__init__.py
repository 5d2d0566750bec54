"""Application layer DTOs"""

from nft_ticketing.service.ticket.app.dto.blockchain_dto import (
    MintedToken,
    MintResult,
    ParsedMintLogs,
    PaymentDetails,
    RegisteredTicketType,
    TokenOwnership,
    TransactionVerification,
)
from nft_ticketing.service.ticket.app.dto.event_dto import EventInfo, EventSession
from nft_ticketing.service.ticket.app.dto.page_dto import Page, PageRequest

__all__ = [
    'EventInfo',
    'EventSession',
    'MintResult',
    'MintedToken',
    'Page',
    'PageRequest',
    'ParsedMintLogs',
    'PaymentDetails',
    'RegisteredTicketType',
    'TokenOwnership',
    'TransactionVerification',
]
