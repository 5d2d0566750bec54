from abc import ABC, abstractmethod
from typing import Any


class IIpfsServiceClient(ABC):
    @abstractmethod
    async def pin_json(self, *, content: dict[str, Any], name: str) -> str:
        """
        Pin a JSON document.

        Returns:
            Content identifier (CID) of the pinned document
        """
        pass
