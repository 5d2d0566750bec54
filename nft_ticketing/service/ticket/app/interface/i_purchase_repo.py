from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase


class IPurchaseRepo(ABC):
    @abstractmethod
    async def create(self, *, purchase: Purchase) -> Purchase:
        pass

    @abstractmethod
    async def get_by_id(self, *, purchase_id: str) -> Optional[Purchase]:
        pass

    @abstractmethod
    async def get_by_transaction_hash(self, *, transaction_hash: str) -> Optional[Purchase]:
        pass

    @abstractmethod
    async def update_metadata_uris(self, *, purchase_id: str, metadata_uris: List[str]) -> bool:
        """Only applies while the purchase is INITIATED."""
        pass

    @abstractmethod
    async def confirm_if_initiated(
        self, *, purchase_id: str, transaction_hash: str, now: datetime
    ) -> bool:
        """
        INITIATED -> CONFIRMED as a single conditional update.

        Returns:
            False when another request already moved the purchase
        """
        pass

    @abstractmethod
    async def fail_if_initiated(self, *, purchase_id: str, reason: str, now: datetime) -> bool:
        pass

    @abstractmethod
    async def expire_overdue(self, *, now: datetime) -> int:
        """Marks INITIATED purchases past expires_at EXPIRED; returns the count."""
        pass
