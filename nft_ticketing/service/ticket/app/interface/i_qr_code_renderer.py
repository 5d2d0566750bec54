from abc import ABC, abstractmethod


class IQrCodeRenderer(ABC):
    @abstractmethod
    def render_data_uri(self, data: str) -> str:
        """PNG image of ``data`` as a ``data:image/png;base64,...`` URI."""
        pass
