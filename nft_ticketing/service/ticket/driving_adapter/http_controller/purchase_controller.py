from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.command.confirm_payment_and_request_mint_use_case import (
    ConfirmPaymentAndRequestMintUseCase,
)
from nft_ticketing.service.ticket.app.command.fail_purchase_use_case import FailPurchaseUseCase
from nft_ticketing.service.ticket.app.command.initiate_purchase_use_case import (
    InitiatePurchaseUseCase,
)
from nft_ticketing.service.ticket.app.command.prepare_metadata_use_case import (
    PrepareMetadataUseCase,
)
from nft_ticketing.service.ticket.app.query.get_purchase_use_case import GetPurchaseUseCase
from nft_ticketing.service.ticket.driving_adapter.schema.purchase_schema import (
    ConfirmPurchaseRequest,
    FailPurchaseRequest,
    InitiatePurchaseRequest,
    InitiatePurchaseResponse,
    PrepareMetadataRequest,
    PrepareMetadataResponse,
    PurchaseResponse,
    PurchaseWithTicketsResponse,
)
from nft_ticketing.service.ticket.driving_adapter.schema.ticket_schema import TicketResponse


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def initiate_purchase(
    request: InitiatePurchaseRequest,
    use_case: InitiatePurchaseUseCase = Depends(InitiatePurchaseUseCase.depends),
) -> InitiatePurchaseResponse:
    with tracer.start_as_current_span('controller.initiate_purchase') as span:
        span.set_attribute('ticket_type.id', request.ticket_type_id)
        result = await use_case.execute(
            ticket_type_id=request.ticket_type_id,
            buyer_address=request.buyer_address,
            quantity=request.quantity,
            selected_seats=request.selected_seats,
        )
        span.set_attribute('purchase.id', result.purchase_id)
        return InitiatePurchaseResponse.from_result(result)


@router.get('/{purchase_id}')
@Logger.io
async def get_purchase(
    purchase_id: str,
    use_case: GetPurchaseUseCase = Depends(GetPurchaseUseCase.depends),
) -> PurchaseWithTicketsResponse:
    result = await use_case.get_purchase(purchase_id)
    return PurchaseWithTicketsResponse(
        purchase=PurchaseResponse.from_entity(result.purchase),
        tickets=[TicketResponse.from_entity(ticket) for ticket in result.tickets],
    )


@router.post('/{purchase_id}/metadata')
@Logger.io
async def prepare_metadata(
    purchase_id: str,
    request: PrepareMetadataRequest,
    use_case: PrepareMetadataUseCase = Depends(PrepareMetadataUseCase.depends),
) -> PrepareMetadataResponse:
    result = await use_case.execute(
        purchase_id=purchase_id,
        quantity=request.quantity,
        selected_seats=request.selected_seats,
    )
    return PrepareMetadataResponse.from_result(result)


@router.post('/{purchase_id}/confirm')
@Logger.io
async def confirm_purchase(
    purchase_id: str,
    request: ConfirmPurchaseRequest,
    use_case: ConfirmPaymentAndRequestMintUseCase = Depends(
        ConfirmPaymentAndRequestMintUseCase.depends
    ),
) -> PurchaseWithTicketsResponse:
    result = await use_case.execute(
        purchase_id=purchase_id, transaction_hash=request.transaction_hash
    )
    return PurchaseWithTicketsResponse(
        purchase=PurchaseResponse.from_entity(result.purchase),
        tickets=[TicketResponse.from_entity(ticket) for ticket in result.tickets],
    )


@router.post('/{purchase_id}/fail')
@Logger.io
async def fail_purchase(
    purchase_id: str,
    request: FailPurchaseRequest,
    use_case: FailPurchaseUseCase = Depends(FailPurchaseUseCase.depends),
) -> PurchaseResponse:
    purchase = await use_case.execute(purchase_id=purchase_id, reason=request.reason)
    return PurchaseResponse.from_entity(purchase)
