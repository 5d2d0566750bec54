from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from nft_ticketing.service.ticket.app.dto.settlement_dto import (
    ProcessSettlementResult,
    SettlementBucket,
    SettlementSummary,
)
from nft_ticketing.service.ticket.domain.entity.platform_transaction_entity import (
    PlatformTransaction,
)
from nft_ticketing.service.ticket.domain.entity.transaction_log_entity import TransactionLog


class SettlementBucketResponse(BaseModel):
    count: int
    amount_wei: str
    platform_fee_wei: str
    organizer_amount_wei: str

    @classmethod
    def from_dto(cls, bucket: SettlementBucket) -> 'SettlementBucketResponse':
        return cls(
            count=bucket.count,
            amount_wei=bucket.amount_wei,
            platform_fee_wei=bucket.platform_fee_wei,
            organizer_amount_wei=bucket.organizer_amount_wei,
        )


class SettlementSummaryResponse(BaseModel):
    event_id: str
    received: SettlementBucketResponse
    settled: SettlementBucketResponse

    @classmethod
    def from_dto(cls, summary: SettlementSummary) -> 'SettlementSummaryResponse':
        return cls(
            event_id=summary.event_id,
            received=SettlementBucketResponse.from_dto(summary.received),
            settled=SettlementBucketResponse.from_dto(summary.settled),
        )


class ProcessSettlementRequest(BaseModel):
    settlement_transaction_hash: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={'example': {'settlement_transaction_hash': '0x' + 'cd' * 32}}
    )


class ProcessSettlementResponse(BaseModel):
    event_id: str
    settled_count: int
    organizer_amount_wei: str
    settlement_transaction_hash: str
    settled_transaction_ids: List[str]

    @classmethod
    def from_result(cls, result: ProcessSettlementResult) -> 'ProcessSettlementResponse':
        return cls(
            event_id=result.event_id,
            settled_count=result.settled_count,
            organizer_amount_wei=result.organizer_amount_wei,
            settlement_transaction_hash=result.settlement_transaction_hash,
            settled_transaction_ids=result.settled_transaction_ids,
        )


class PlatformTransactionResponse(BaseModel):
    id: str
    transaction_hash: str
    purchase_id: str
    event_id: str
    event_organizer_id: str
    buyer_address: str
    amount_wei: str
    platform_fee_wei: str
    organizer_amount_wei: str
    platform_fee_percent: int
    status: str
    settled_at: Optional[datetime] = None
    settlement_transaction_hash: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, tx: PlatformTransaction) -> 'PlatformTransactionResponse':
        return cls(
            id=tx.id,
            transaction_hash=tx.transaction_hash,
            purchase_id=tx.purchase_id,
            event_id=tx.event_id,
            event_organizer_id=tx.event_organizer_id,
            buyer_address=tx.buyer_address,
            amount_wei=tx.amount_wei,
            platform_fee_wei=tx.platform_fee_wei,
            organizer_amount_wei=tx.organizer_amount_wei,
            platform_fee_percent=tx.platform_fee_percent,
            status=tx.status.value,
            settled_at=tx.settled_at,
            settlement_transaction_hash=tx.settlement_transaction_hash,
            created_at=tx.created_at,
        )


class PlatformTransactionPageResponse(BaseModel):
    transactions: List[PlatformTransactionResponse]
    next_page_token: str = ''


class TransactionLogResponse(BaseModel):
    id: str
    transaction_hash: str
    type: str
    status: str
    event_id: str
    amount_wei: str
    platform_fee_wei: str
    organizer_amount_wei: str
    fee_percent_at_time: int
    from_address: str
    to_address: str
    block_number: Optional[int] = None
    related_purchase_id: Optional[str] = None
    related_ticket_ids: List[str] = []
    metadata: Dict[str, Any] = {}
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, log: TransactionLog) -> 'TransactionLogResponse':
        return cls(
            id=log.id,
            transaction_hash=log.transaction_hash,
            type=log.type.value,
            status=log.status.value,
            event_id=log.event_id,
            amount_wei=log.amount_wei,
            platform_fee_wei=log.platform_fee_wei,
            organizer_amount_wei=log.organizer_amount_wei,
            fee_percent_at_time=log.fee_percent_at_time,
            from_address=log.from_address,
            to_address=log.to_address,
            block_number=log.block_number,
            related_purchase_id=log.related_purchase_id,
            related_ticket_ids=log.related_ticket_ids,
            metadata=log.metadata,
            created_at=log.created_at,
        )


class TransactionLogPageResponse(BaseModel):
    transaction_logs: List[TransactionLogResponse]
    next_page_token: str = ''
