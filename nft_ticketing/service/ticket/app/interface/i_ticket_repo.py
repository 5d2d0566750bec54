from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket
from nft_ticketing.service.ticket.domain.enum.ticket_status import TicketStatus


class ITicketRepo(ABC):
    # Command side

    @abstractmethod
    async def create_many(self, *, tickets: List[Ticket]) -> List[Ticket]:
        """Raises AlreadyExistsError on a seat or batch-index collision."""
        pass

    @abstractmethod
    async def mark_minted(self, *, ticket: Ticket) -> bool:
        """Persists the minted fields unless the ticket is already MINTED."""
        pass

    @abstractmethod
    async def claim_for_mint(self, *, ticket: Ticket) -> bool:
        """
        PENDING_PAYMENT/PAID -> MINTING for a ticket with no token yet.

        Returns:
            False when another confirmation already claimed or minted it
        """
        pass

    @abstractmethod
    async def record_mint_token(self, *, ticket: Ticket) -> bool:
        """Stores token_id/token_uri_cid on a MINTING ticket that has none."""
        pass

    @abstractmethod
    async def release_mint_claim(self, *, ticket: Ticket) -> bool:
        """MINTING -> PENDING_PAYMENT, only while no token is recorded."""
        pass

    @abstractmethod
    async def update_credential(
        self, *, ticket_id: str, qr_code_secret: str, expiry_time: Optional[datetime]
    ) -> None:
        pass

    @abstractmethod
    async def check_in_if_not_checked(
        self, *, ticket_id: str, location: str, scanner_id: str, now: datetime
    ) -> bool:
        """
        NOT_CHECKED_IN -> CHECKED_IN as a single conditional update.

        Returns:
            False when the ticket was checked in concurrently
        """
        pass

    @abstractmethod
    async def delete_pending_by_purchase(self, *, purchase_id: str) -> int:
        pass

    @abstractmethod
    async def release_expired_seat_holds(
        self, *, event_id: str, seat_keys: List[str], now: datetime
    ) -> int:
        """Deletes lapsed PENDING_PAYMENT holds on the given seats."""
        pass

    @abstractmethod
    async def list_ticket_type_ids_with_expired_pending(self, *, now: datetime) -> List[str]:
        pass

    @abstractmethod
    async def delete_expired_pending(self, *, now: datetime) -> int:
        pass

    # Query side

    @abstractmethod
    async def get_by_id(self, *, ticket_id: str) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def get_by_qr_code_secret(self, *, qr_code_secret: str) -> Optional[Ticket]:
        pass

    @abstractmethod
    async def list_by_purchase(self, *, purchase_id: str) -> List[Ticket]:
        """Ordered by batch_index."""
        pass

    @abstractmethod
    async def find_taken_seats(self, *, event_id: str, seat_keys: List[str]) -> List[str]:
        pass

    @abstractmethod
    async def count_for_availability(self, *, ticket_type_id: str, now: datetime) -> Tuple[int, int]:
        """
        Returns:
            (minted count, unexpired reservation count)
        """
        pass

    @abstractmethod
    async def list_by_event(self, *, event_id: str, limit: int, offset: int) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_by_owner(self, *, owner_address: str, limit: int, offset: int) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_all(
        self, *, limit: int, offset: int, status: Optional[TicketStatus] = None
    ) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_sold_seat_keys(self, *, event_id: str, now: datetime) -> List[str]:
        pass

    # Analytics

    @abstractmethod
    async def count_by_status(self, *, event_id: str) -> Dict[str, int]:
        pass

    @abstractmethod
    async def count_check_in_status(
        self, *, event_id: str, since: Optional[datetime] = None
    ) -> Tuple[int, int]:
        """
        Returns:
            (checked in, not checked in) among MINTED tickets
        """
        pass

    @abstractmethod
    async def daily_sold(
        self, *, event_id: str, start: datetime, end: datetime
    ) -> List[Tuple[date, int]]:
        pass

    @abstractmethod
    async def hourly_check_ins(
        self, *, event_id: str, since: Optional[datetime] = None
    ) -> List[Tuple[int, int]]:
        pass

    @abstractmethod
    async def check_ins_by_location(
        self, *, event_id: str, since: Optional[datetime] = None
    ) -> Dict[str, int]:
        pass

    @abstractmethod
    async def count_sold_by_events(self, *, event_ids: List[str]) -> Dict[str, int]:
        pass
