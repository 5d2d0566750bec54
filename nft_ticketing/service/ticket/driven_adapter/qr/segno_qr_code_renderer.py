import segno

from nft_ticketing.platform.config.core_setting import settings
from nft_ticketing.service.ticket.app.interface.i_qr_code_renderer import IQrCodeRenderer


class SegnoQrCodeRenderer(IQrCodeRenderer):
    def __init__(
        self, *, scale: int = settings.QR_CODE_SCALE, border: int = settings.QR_CODE_BORDER
    ) -> None:
        self.scale = scale
        self.border = border

    def render_data_uri(self, data: str) -> str:
        # Error correction M keeps a ~400 byte credential scannable on phone screens
        qr = segno.make_qr(data, error='m')
        return qr.png_data_uri(scale=self.scale, border=self.border)
