from datetime import datetime
from typing import List

import attrs

from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket


@attrs.define(frozen=True)
class InitiatePurchaseResult:
    purchase_id: str
    payment_contract_address: str
    price_to_pay_wei: str
    blockchain_event_id: str
    blockchain_ticket_type_id: str
    session_id_for_contract: str
    expires_at: datetime


@attrs.define(frozen=True)
class PrepareMetadataResult:
    purchase_id: str
    metadata_uris: List[str]


@attrs.define(frozen=True)
class ConfirmPurchaseResult:
    purchase: Purchase
    tickets: List[Ticket]


@attrs.define(frozen=True)
class ReapResult:
    deleted_tickets: int = 0
    expired_purchases: int = 0
    recomputed_ticket_types: int = 0
