from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from nft_ticketing.service.ticket.app.dto.check_in_dto import QrCodeResult
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket


class SeatInfoResponse(BaseModel):
    seat_key: str
    section: str
    row: int
    seat: int


class TicketResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'id': '0192f1e2-8a00-7000-8000-000000000001',
                'purchase_id': '0192f1e2-7f00-7000-8000-000000000001',
                'batch_index': 0,
                'event_id': 'evt-2025-taipei',
                'ticket_type_id': '0192f1e2-7b3c-7d4e-8f90-123456789abc',
                'owner_address': '0x8ba1f109551bd432803012645ac136ddd64dba72',
                'session_id': 'session-1',
                'status': 'MINTED',
                'token_id': '42',
                'token_uri_cid': 'ipfs://bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi',
                'check_in_status': 'NOT_CHECKED_IN',
                'seat_info': {'seat_key': 'A-3-12', 'section': 'A', 'row': 3, 'seat': 12},
            }
        }
    )

    id: str
    purchase_id: str
    batch_index: int
    event_id: str
    ticket_type_id: str
    owner_address: str
    session_id: str
    status: str
    token_id: str
    token_uri_cid: str
    transaction_hash: str
    check_in_status: str
    check_in_time: Optional[datetime] = None
    check_in_location: str = ''
    expiry_time: Optional[datetime] = None
    seat_info: Optional[SeatInfoResponse] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketResponse':
        seat = ticket.seat_info
        return cls(
            id=ticket.id,
            purchase_id=ticket.purchase_id,
            batch_index=ticket.batch_index,
            event_id=ticket.event_id,
            ticket_type_id=ticket.ticket_type_id,
            owner_address=ticket.owner_address,
            session_id=ticket.session_id,
            status=ticket.status.value,
            token_id=ticket.token_id,
            token_uri_cid=ticket.token_uri_cid,
            transaction_hash=ticket.transaction_hash,
            check_in_status=ticket.check_in_status.value,
            check_in_time=ticket.check_in_time,
            check_in_location=ticket.check_in_location,
            expiry_time=ticket.expiry_time,
            seat_info=(
                SeatInfoResponse(
                    seat_key=seat.seat_key, section=seat.section, row=seat.row, seat=seat.seat
                )
                if seat
                else None
            ),
            created_at=ticket.created_at,
        )


class TicketPageResponse(BaseModel):
    tickets: List[TicketResponse]
    next_page_token: str = ''


class SoldSeatsResponse(BaseModel):
    event_id: str
    seat_keys: List[str]
    next_page_token: str = ''


class QrCodeResponse(BaseModel):
    ticket_id: str
    qr_code_data: str
    qr_code_image_base64: str
    reissued: bool

    @classmethod
    def from_result(cls, result: QrCodeResult) -> 'QrCodeResponse':
        return cls(
            ticket_id=result.ticket_id,
            qr_code_data=result.qr_code_data,
            qr_code_image_base64=result.qr_code_image_base64,
            reissued=result.reissued,
        )


class CheckInRequest(BaseModel):
    qr_code_data: str
    location: str = ''
    scanner_id: str = ''

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'qr_code_data': '{"eventId":"evt-2025-taipei","message":"nft-ticket-checkin|...",...}',
                'location': 'Gate A',
                'scanner_id': 'scanner-07',
            }
        }
    )


class CheckInResponse(BaseModel):
    success: bool
    message: str
    ticket: TicketResponse
