from typing import List, Optional

import httpx

from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.dto.event_dto import EventInfo
from nft_ticketing.service.ticket.app.interface.i_event_service_client import IEventServiceClient
from nft_ticketing.service.ticket.driven_adapter.client.base_http_client import BaseHttpClient


class EventServiceClient(BaseHttpClient, IEventServiceClient):
    service_name = 'event-service'

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(base_url=base_url, default_timeout=timeout, transport=transport)

    @Logger.io
    async def get_event(self, *, event_id: str) -> EventInfo:
        data = await self._request('GET', f'/events/{event_id}', operation='GetEvent')
        return EventInfo.from_dict(data.get('event', data))

    @Logger.io
    async def list_events_by_organizer(self, *, organizer_id: str) -> List[EventInfo]:
        data = await self._request(
            'GET', '/events', operation='ListEvents', params={'organizer_id': organizer_id}
        )
        return [EventInfo.from_dict(event) for event in data.get('events', [])]
