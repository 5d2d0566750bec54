from abc import ABC, abstractmethod
from typing import List

from nft_ticketing.service.ticket.app.dto.event_dto import EventInfo


class IEventServiceClient(ABC):
    @abstractmethod
    async def get_event(self, *, event_id: str) -> EventInfo:
        """Raises NotFoundError for an unknown event."""
        pass

    @abstractmethod
    async def list_events_by_organizer(self, *, organizer_id: str) -> List[EventInfo]:
        pass
