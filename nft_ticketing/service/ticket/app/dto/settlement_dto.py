from typing import List

import attrs


@attrs.define(frozen=True)
class SettlementBucket:
    count: int = 0
    amount_wei: str = '0'
    platform_fee_wei: str = '0'
    organizer_amount_wei: str = '0'


@attrs.define(frozen=True)
class SettlementSummary:
    event_id: str
    received: SettlementBucket
    settled: SettlementBucket


@attrs.define(frozen=True)
class ProcessSettlementResult:
    event_id: str
    settled_count: int
    organizer_amount_wei: str
    settlement_transaction_hash: str
    settled_transaction_ids: List[str] = attrs.field(factory=list)
