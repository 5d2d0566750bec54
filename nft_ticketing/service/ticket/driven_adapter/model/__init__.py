"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from nft_ticketing.service.ticket.driven_adapter.model.platform_transaction_model import (
    PlatformTransactionModel,
)
from nft_ticketing.service.ticket.driven_adapter.model.purchase_model import PurchaseModel
from nft_ticketing.service.ticket.driven_adapter.model.ticket_model import TicketModel
from nft_ticketing.service.ticket.driven_adapter.model.ticket_type_model import TicketTypeModel
from nft_ticketing.service.ticket.driven_adapter.model.transaction_log_model import (
    TransactionLogModel,
)

__all__ = [
    'PlatformTransactionModel',
    'PurchaseModel',
    'TicketModel',
    'TicketTypeModel',
    'TransactionLogModel',
]
