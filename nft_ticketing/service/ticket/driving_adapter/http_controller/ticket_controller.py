from typing import Optional

from fastapi import APIRouter, Depends

from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.command.generate_qr_code_use_case import (
    GenerateQrCodeUseCase,
)
from nft_ticketing.service.ticket.app.dto.page_dto import PageRequest
from nft_ticketing.service.ticket.app.query.list_tickets_use_case import ListTicketsUseCase
from nft_ticketing.service.ticket.driving_adapter.schema.ticket_schema import (
    QrCodeResponse,
    SoldSeatsResponse,
    TicketPageResponse,
    TicketResponse,
)


router = APIRouter()


@router.get('')
@Logger.io
async def list_all_tickets(
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    status: Optional[str] = None,
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> TicketPageResponse:
    page = await use_case.list_all(
        PageRequest.parse(page_size=page_size, page_token=page_token), status=status
    )
    return TicketPageResponse(
        tickets=[TicketResponse.from_entity(ticket) for ticket in page.items],
        next_page_token=page.next_page_token,
    )


@router.get('/event/{event_id}')
@Logger.io
async def list_tickets_by_event(
    event_id: str,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> TicketPageResponse:
    page = await use_case.list_by_event(
        event_id, PageRequest.parse(page_size=page_size, page_token=page_token)
    )
    return TicketPageResponse(
        tickets=[TicketResponse.from_entity(ticket) for ticket in page.items],
        next_page_token=page.next_page_token,
    )


@router.get('/event/{event_id}/sold_seats')
@Logger.io
async def get_sold_seats_by_event(
    event_id: str,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> SoldSeatsResponse:
    page = await use_case.list_sold_seats(
        event_id, PageRequest.parse(page_size=page_size, page_token=page_token)
    )
    return SoldSeatsResponse(
        event_id=event_id, seat_keys=page.items, next_page_token=page.next_page_token
    )


@router.get('/owner/{owner_address}')
@Logger.io
async def list_tickets_by_owner(
    owner_address: str,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> TicketPageResponse:
    page = await use_case.list_by_owner(
        owner_address, PageRequest.parse(page_size=page_size, page_token=page_token)
    )
    return TicketPageResponse(
        tickets=[TicketResponse.from_entity(ticket) for ticket in page.items],
        next_page_token=page.next_page_token,
    )


@router.get('/{ticket_id}')
@Logger.io
async def get_ticket(
    ticket_id: str,
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> TicketResponse:
    return TicketResponse.from_entity(await use_case.get_ticket(ticket_id))


@router.post('/{ticket_id}/qr_code')
@Logger.io
async def generate_qr_code(
    ticket_id: str,
    use_case: GenerateQrCodeUseCase = Depends(GenerateQrCodeUseCase.depends),
) -> QrCodeResponse:
    return QrCodeResponse.from_result(await use_case.execute(ticket_id=ticket_id))
