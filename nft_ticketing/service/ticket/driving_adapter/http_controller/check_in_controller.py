from fastapi import APIRouter, Depends
from opentelemetry import trace

from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.command.check_in_use_case import CheckInUseCase
from nft_ticketing.service.ticket.driving_adapter.schema.ticket_schema import (
    CheckInRequest,
    CheckInResponse,
    TicketResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('')
@Logger.io
async def check_in(
    request: CheckInRequest,
    use_case: CheckInUseCase = Depends(CheckInUseCase.depends),
) -> CheckInResponse:
    with tracer.start_as_current_span('controller.check_in') as span:
        span.set_attribute('check_in.location', request.location)
        result = await use_case.execute(
            qr_code_data=request.qr_code_data,
            location=request.location,
            scanner_id=request.scanner_id,
        )
        return CheckInResponse(
            success=True, message=result.message, ticket=TicketResponse.from_entity(result.ticket)
        )
