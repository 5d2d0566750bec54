from typing import Optional

from fastapi import APIRouter, Depends

from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.command.process_event_settlement_use_case import (
    ProcessEventSettlementUseCase,
)
from nft_ticketing.service.ticket.app.dto.page_dto import PageRequest
from nft_ticketing.service.ticket.app.query.get_settlement_use_case import GetSettlementUseCase
from nft_ticketing.service.ticket.driving_adapter.schema.settlement_schema import (
    PlatformTransactionPageResponse,
    PlatformTransactionResponse,
    ProcessSettlementRequest,
    ProcessSettlementResponse,
    SettlementSummaryResponse,
    TransactionLogPageResponse,
    TransactionLogResponse,
)


router = APIRouter()


@router.get('/event/{event_id}')
@Logger.io
async def get_event_settlement_summary(
    event_id: str,
    use_case: GetSettlementUseCase = Depends(GetSettlementUseCase.depends),
) -> SettlementSummaryResponse:
    return SettlementSummaryResponse.from_dto(await use_case.get_summary(event_id))


@router.post('/event/{event_id}')
@Logger.io
async def process_event_settlement(
    event_id: str,
    request: ProcessSettlementRequest,
    use_case: ProcessEventSettlementUseCase = Depends(ProcessEventSettlementUseCase.depends),
) -> ProcessSettlementResponse:
    result = await use_case.execute(
        event_id=event_id, settlement_transaction_hash=request.settlement_transaction_hash
    )
    return ProcessSettlementResponse.from_result(result)


@router.get('/platform_transactions')
@Logger.io
async def list_platform_transactions(
    event_id: Optional[str] = None,
    status: Optional[str] = None,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    use_case: GetSettlementUseCase = Depends(GetSettlementUseCase.depends),
) -> PlatformTransactionPageResponse:
    page = await use_case.list_platform_transactions(
        PageRequest.parse(page_size=page_size, page_token=page_token),
        event_id=event_id,
        status=status,
    )
    return PlatformTransactionPageResponse(
        transactions=[PlatformTransactionResponse.from_entity(tx) for tx in page.items],
        next_page_token=page.next_page_token,
    )


@router.get('/transaction_logs')
@Logger.io
async def list_transaction_logs(
    event_id: Optional[str] = None,
    page_size: Optional[int] = None,
    page_token: Optional[str] = None,
    use_case: GetSettlementUseCase = Depends(GetSettlementUseCase.depends),
) -> TransactionLogPageResponse:
    page = await use_case.list_transaction_logs(
        PageRequest.parse(page_size=page_size, page_token=page_token), event_id=event_id
    )
    return TransactionLogPageResponse(
        transaction_logs=[TransactionLogResponse.from_entity(log) for log in page.items],
        next_page_token=page.next_page_token,
    )
