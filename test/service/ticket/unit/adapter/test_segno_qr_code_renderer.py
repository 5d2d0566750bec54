import base64

import pytest

from nft_ticketing.service.ticket.driven_adapter.qr.segno_qr_code_renderer import (
    SegnoQrCodeRenderer,
)


PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


@pytest.mark.unit
class TestSegnoQrCodeRenderer:
    def test_renders_png_data_uri(self) -> None:
        data_uri = SegnoQrCodeRenderer(scale=4, border=2).render_data_uri('{"ticket_id":"t-1"}')

        prefix = 'data:image/png;base64,'
        assert data_uri.startswith(prefix)
        assert base64.b64decode(data_uri[len(prefix) :]).startswith(PNG_SIGNATURE)

    def test_larger_scale_gives_larger_image(self) -> None:
        payload = '{"ticket_id":"t-1"}'

        small = SegnoQrCodeRenderer(scale=2, border=1).render_data_uri(payload)
        large = SegnoQrCodeRenderer(scale=8, border=1).render_data_uri(payload)

        assert len(large) > len(small)
