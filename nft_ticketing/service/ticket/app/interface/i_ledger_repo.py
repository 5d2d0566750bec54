from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from nft_ticketing.service.ticket.domain.entity.platform_transaction_entity import (
    PlatformTransaction,
)
from nft_ticketing.service.ticket.domain.entity.transaction_log_entity import TransactionLog
from nft_ticketing.service.ticket.domain.enum.ledger_status import PlatformTransactionStatus


class ILedgerRepo(ABC):
    """Financial audit trail and settlement records."""

    @abstractmethod
    async def add_transaction_log(self, *, log: TransactionLog) -> TransactionLog:
        pass

    @abstractmethod
    async def add_platform_transaction(
        self, *, platform_transaction: PlatformTransaction
    ) -> PlatformTransaction:
        pass

    @abstractmethod
    async def list_platform_transactions(
        self,
        *,
        event_ids: Optional[List[str]] = None,
        status: Optional[PlatformTransactionStatus] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[PlatformTransaction]:
        """Newest first; no limit returns every match."""
        pass

    @abstractmethod
    async def settle_received(
        self, *, event_id: str, settlement_transaction_hash: str, now: datetime
    ) -> List[PlatformTransaction]:
        """RECEIVED -> SETTLED for every platform transaction of the event."""
        pass

    @abstractmethod
    async def list_transaction_logs(
        self, *, event_id: Optional[str] = None, limit: int, offset: int
    ) -> List[TransactionLog]:
        pass
