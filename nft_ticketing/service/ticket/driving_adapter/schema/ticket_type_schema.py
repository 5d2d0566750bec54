from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType


class TicketTypeCreateRequest(BaseModel):
    event_id: str
    session_id: str
    name: str = Field(min_length=1, max_length=200)
    description: str = ''
    total_quantity: int
    price_wei: str

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'event_id': 'evt-2025-taipei',
                'session_id': 'session-1',
                'name': 'VIP',
                'description': 'Front rows with lounge access',
                'total_quantity': 100,
                'price_wei': '50000000000000000',
            }
        }
    )


class TicketTypeUpdateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    total_quantity: Optional[int] = None
    price_wei: Optional[str] = None
    blockchain_event_id: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={'example': {'description': 'Now includes merch pack', 'total_quantity': 120}}
    )


class TicketTypeResponse(BaseModel):
    id: str
    event_id: str
    session_id: str
    contract_session_id: str
    name: str
    description: str
    total_quantity: int
    available_quantity: int
    price_wei: str
    blockchain_event_id: str
    blockchain_ticket_type_id: str
    is_published: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket_type: TicketType) -> 'TicketTypeResponse':
        return cls(
            id=ticket_type.id,
            event_id=ticket_type.event_id,
            session_id=ticket_type.session_id,
            contract_session_id=ticket_type.contract_session_id,
            name=ticket_type.name,
            description=ticket_type.description,
            total_quantity=ticket_type.total_quantity,
            available_quantity=ticket_type.available_quantity,
            price_wei=ticket_type.price_wei,
            blockchain_event_id=ticket_type.blockchain_event_id,
            blockchain_ticket_type_id=ticket_type.blockchain_ticket_type_id,
            is_published=ticket_type.is_published,
            created_at=ticket_type.created_at,
            updated_at=ticket_type.updated_at,
        )


class TicketTypePageResponse(BaseModel):
    ticket_types: List[TicketTypeResponse]
    next_page_token: str = ''


class AvailabilityResponse(BaseModel):
    ticket_type_id: str
    available_quantity: int
