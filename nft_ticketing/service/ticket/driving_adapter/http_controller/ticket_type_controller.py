from typing import List, Optional

from fastapi import APIRouter, Depends, status

from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.command.create_ticket_type_use_case import (
    CreateTicketTypeUseCase,
)
from nft_ticketing.service.ticket.app.command.publish_ticket_type_use_case import (
    PublishTicketTypeUseCase,
)
from nft_ticketing.service.ticket.app.command.update_ticket_type_use_case import (
    UpdateTicketTypeUseCase,
)
from nft_ticketing.service.ticket.app.dto.page_dto import PageRequest
from nft_ticketing.service.ticket.app.query.get_ticket_type_use_case import GetTicketTypeUseCase
from nft_ticketing.service.ticket.driving_adapter.schema.ticket_type_schema import (
    AvailabilityResponse,
    TicketTypeCreateRequest,
    TicketTypePageResponse,
    TicketTypeResponse,
    TicketTypeUpdateRequest,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_ticket_type(
    request: TicketTypeCreateRequest,
    use_case: CreateTicketTypeUseCase = Depends(CreateTicketTypeUseCase.depends),
) -> TicketTypeResponse:
    ticket_type = await use_case.execute(
        event_id=request.event_id,
        session_id=request.session_id,
        name=request.name,
        description=request.description,
        total_quantity=request.total_quantity,
        price_wei=request.price_wei,
    )
    return TicketTypeResponse.from_entity(ticket_type)


@router.get('')
@Logger.io
async def list_all_ticket_types(
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    status_filter: Optional[str] = None,
    event_id: Optional[str] = None,
    use_case: GetTicketTypeUseCase = Depends(GetTicketTypeUseCase.depends),
) -> TicketTypePageResponse:
    page = await use_case.list_all(
        PageRequest.parse(page_size=page_size, page_token=page_token),
        status_filter=status_filter,
        event_id=event_id,
    )
    return TicketTypePageResponse(
        ticket_types=[TicketTypeResponse.from_entity(t) for t in page.items],
        next_page_token=page.next_page_token,
    )


@router.get('/event/{event_id}')
@Logger.io
async def list_ticket_types_by_event(
    event_id: str,
    use_case: GetTicketTypeUseCase = Depends(GetTicketTypeUseCase.depends),
) -> List[TicketTypeResponse]:
    return [TicketTypeResponse.from_entity(t) for t in await use_case.list_by_event(event_id)]


@router.get('/session/{session_id}')
@Logger.io
async def list_ticket_types_by_session(
    session_id: str,
    use_case: GetTicketTypeUseCase = Depends(GetTicketTypeUseCase.depends),
) -> List[TicketTypeResponse]:
    return [TicketTypeResponse.from_entity(t) for t in await use_case.list_by_session(session_id)]


@router.get('/{ticket_type_id}')
@Logger.io
async def get_ticket_type(
    ticket_type_id: str,
    use_case: GetTicketTypeUseCase = Depends(GetTicketTypeUseCase.depends),
) -> TicketTypeResponse:
    return TicketTypeResponse.from_entity(await use_case.get_ticket_type(ticket_type_id))


@router.get('/{ticket_type_id}/availability')
@Logger.io
async def get_ticket_type_availability(
    ticket_type_id: str,
    use_case: GetTicketTypeUseCase = Depends(GetTicketTypeUseCase.depends),
) -> AvailabilityResponse:
    available = await use_case.get_availability(ticket_type_id)
    return AvailabilityResponse(ticket_type_id=ticket_type_id, available_quantity=available)


@router.patch('/{ticket_type_id}')
@Logger.io
async def update_ticket_type(
    ticket_type_id: str,
    request: TicketTypeUpdateRequest,
    use_case: UpdateTicketTypeUseCase = Depends(UpdateTicketTypeUseCase.depends),
) -> TicketTypeResponse:
    ticket_type = await use_case.execute(
        ticket_type_id=ticket_type_id,
        name=request.name,
        description=request.description,
        total_quantity=request.total_quantity,
        price_wei=request.price_wei,
        blockchain_event_id=request.blockchain_event_id,
    )
    return TicketTypeResponse.from_entity(ticket_type)


@router.post('/{ticket_type_id}/publish')
@Logger.io
async def publish_ticket_type(
    ticket_type_id: str,
    use_case: PublishTicketTypeUseCase = Depends(PublishTicketTypeUseCase.depends),
) -> TicketTypeResponse:
    return TicketTypeResponse.from_entity(await use_case.execute(ticket_type_id=ticket_type_id))
