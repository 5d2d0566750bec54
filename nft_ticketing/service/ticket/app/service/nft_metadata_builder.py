from typing import Any, Optional

from nft_ticketing.service.ticket.app.dto.event_dto import EventInfo
from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType
from nft_ticketing.service.ticket.domain.value_object.seat_info import SeatInfo


class NftMetadataBuilder:
    """ERC-721 style metadata documents, one per ticket of a purchase."""

    @staticmethod
    def pin_name(*, purchase: Purchase, index: int) -> str:
        return (
            f'ticket_meta_event_{purchase.event_id}_tt_{purchase.ticket_type_id}'
            f'_{purchase.id}_{index}'
        )

    def build(
        self,
        *,
        event: EventInfo,
        ticket_type: TicketType,
        purchase: Purchase,
        index: int,
        seat: Optional[SeatInfo] = None,
    ) -> dict[str, Any]:
        session = event.find_session(ticket_type.session_id)
        attributes: list[dict[str, Any]] = [
            {'trait_type': 'Event Name', 'value': event.name},
            {'trait_type': 'Ticket Type', 'value': ticket_type.name},
            {
                'trait_type': 'Event Blockchain ID',
                'value': ticket_type.blockchain_event_id or event.blockchain_event_id,
            },
            {'trait_type': 'Session', 'value': session.name if session else ticket_type.session_id},
            {'trait_type': 'Price (WEI)', 'value': ticket_type.price_wei},
        ]
        if seat:
            attributes.append({'trait_type': 'Seat', 'value': seat.seat_key})
        attributes.append(
            {'trait_type': 'Ticket Number', 'value': f'{index + 1}/{purchase.quantity}'}
        )

        document: dict[str, Any] = {
            'name': f'Ticket: {ticket_type.name} - Event: {event.name}',
            'description': (
                f'Official NFT ticket for {event.name}. '
                f'{ticket_type.description or ""}'.strip()
            ),
            'attributes': attributes,
        }
        if event.banner_url_cid:
            document['image'] = f'ipfs://{event.banner_url_cid}'
        return document
