from abc import ABC, abstractmethod
from typing import List, Optional

from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType


class ITicketTypeRepo(ABC):
    @abstractmethod
    async def create(self, *, ticket_type: TicketType) -> TicketType:
        """Raises AlreadyExistsError when (event_id, name) is taken."""
        pass

    @abstractmethod
    async def get_by_id(self, *, ticket_type_id: str) -> Optional[TicketType]:
        pass

    @abstractmethod
    async def get_by_id_for_update(self, *, ticket_type_id: str) -> Optional[TicketType]:
        """Row-locks the ticket type until the surrounding transaction ends."""
        pass

    @abstractmethod
    async def lock_many(self, *, ticket_type_ids: List[str]) -> None:
        """Row-locks several ticket types in id order."""
        pass

    @abstractmethod
    async def exists_by_event_and_name(
        self, *, event_id: str, name: str, exclude_id: Optional[str] = None
    ) -> bool:
        pass

    @abstractmethod
    async def update(self, *, ticket_type: TicketType) -> TicketType:
        pass

    @abstractmethod
    async def set_available_quantity(self, *, ticket_type_id: str, available_quantity: int) -> None:
        pass

    @abstractmethod
    async def try_reserve(self, *, ticket_type_id: str, quantity: int) -> bool:
        """
        Conditional decrement of the availability cache.

        Returns:
            False when fewer than ``quantity`` tickets are available
        """
        pass

    @abstractmethod
    async def list_by_event(self, *, event_id: str) -> List[TicketType]:
        pass

    @abstractmethod
    async def list_by_session(self, *, session_id: str) -> List[TicketType]:
        pass

    @abstractmethod
    async def list_all(
        self,
        *,
        limit: int,
        offset: int,
        published: Optional[bool] = None,
        event_id: Optional[str] = None,
    ) -> List[TicketType]:
        """Newest first."""
        pass
