from typing import Any, Optional

import httpx

from nft_ticketing.platform.exception.exceptions import InternalError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.interface.i_ipfs_service_client import IIpfsServiceClient
from nft_ticketing.service.ticket.driven_adapter.client.base_http_client import BaseHttpClient


class IpfsServiceClient(BaseHttpClient, IIpfsServiceClient):
    service_name = 'ipfs-service'

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(base_url=base_url, default_timeout=timeout, transport=transport)

    @Logger.io
    async def pin_json(self, *, content: dict[str, Any], name: str) -> str:
        data = await self._request(
            'POST', '/pin/json', operation='PinJSONToIPFS', json={'content': content, 'name': name}
        )
        content_hash = data.get('content_hash') or data.get('ipfs_hash')
        if not content_hash:
            raise InternalError(f'IPFS pin for {name} returned no content hash')
        return content_hash
