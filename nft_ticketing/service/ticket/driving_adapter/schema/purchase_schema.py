from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from nft_ticketing.service.ticket.app.dto.purchase_dto import (
    InitiatePurchaseResult,
    PrepareMetadataResult,
)
from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase
from nft_ticketing.service.ticket.driving_adapter.schema.ticket_schema import TicketResponse


class InitiatePurchaseRequest(BaseModel):
    ticket_type_id: str
    buyer_address: str
    quantity: int = 0  # Ignored when seats are selected
    selected_seats: List[str] = []

    model_config = ConfigDict(
        json_schema_extra={
            'examples': [
                {
                    'ticket_type_id': '0192f1e2-7b3c-7d4e-8f90-123456789abc',
                    'buyer_address': '0x8ba1f109551bD432803012645Ac136ddd64DBA72',
                    'quantity': 2,
                },
                {
                    'ticket_type_id': '0192f1e2-7b3c-7d4e-8f90-123456789abc',
                    'buyer_address': '0x8ba1f109551bD432803012645Ac136ddd64DBA72',
                    'selected_seats': ['A-3-12', 'A-3-13'],
                },
            ]
        }
    )


class InitiatePurchaseResponse(BaseModel):
    purchase_id: str
    payment_contract_address: str
    price_to_pay_wei: str
    blockchain_event_id: str
    blockchain_ticket_type_id: str
    session_id_for_contract: str
    expires_at: datetime

    @classmethod
    def from_result(cls, result: InitiatePurchaseResult) -> 'InitiatePurchaseResponse':
        return cls(
            purchase_id=result.purchase_id,
            payment_contract_address=result.payment_contract_address,
            price_to_pay_wei=result.price_to_pay_wei,
            blockchain_event_id=result.blockchain_event_id,
            blockchain_ticket_type_id=result.blockchain_ticket_type_id,
            session_id_for_contract=result.session_id_for_contract,
            expires_at=result.expires_at,
        )


class PrepareMetadataRequest(BaseModel):
    quantity: int = 0
    selected_seats: List[str] = []

    model_config = ConfigDict(json_schema_extra={'example': {'quantity': 2}})


class PrepareMetadataResponse(BaseModel):
    purchase_id: str
    metadata_uris: List[str]

    @classmethod
    def from_result(cls, result: PrepareMetadataResult) -> 'PrepareMetadataResponse':
        return cls(purchase_id=result.purchase_id, metadata_uris=result.metadata_uris)


class ConfirmPurchaseRequest(BaseModel):
    transaction_hash: str

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'transaction_hash': '0x' + 'ab' * 32,
            }
        }
    )


class FailPurchaseRequest(BaseModel):
    reason: str = Field(default='', max_length=500)

    model_config = ConfigDict(json_schema_extra={'example': {'reason': 'Wallet rejected the payment'}})


class PurchaseResponse(BaseModel):
    id: str
    ticket_type_id: str
    event_id: str
    quantity: int
    wallet_address: str
    status: str
    expires_at: datetime
    selected_seats: List[str]
    metadata_uris: List[str]
    purchase_details: Dict[str, Any]
    transaction_hash: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, purchase: Purchase) -> 'PurchaseResponse':
        return cls(
            id=purchase.id,
            ticket_type_id=purchase.ticket_type_id,
            event_id=purchase.event_id,
            quantity=purchase.quantity,
            wallet_address=purchase.wallet_address,
            status=purchase.status.value,
            expires_at=purchase.expires_at,
            selected_seats=purchase.selected_seats,
            metadata_uris=purchase.metadata_uris,
            purchase_details=purchase.purchase_details,
            transaction_hash=purchase.transaction_hash,
            failure_reason=purchase.failure_reason,
            created_at=purchase.created_at,
            updated_at=purchase.updated_at,
        )


class PurchaseWithTicketsResponse(BaseModel):
    purchase: PurchaseResponse
    tickets: List[TicketResponse]
