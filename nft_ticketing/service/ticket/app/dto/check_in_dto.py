import attrs

from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket


@attrs.define(frozen=True)
class QrCodeResult:
    ticket_id: str
    qr_code_data: str
    qr_code_image_base64: str
    reissued: bool = False


@attrs.define(frozen=True)
class CheckInResult:
    ticket: Ticket
    message: str = 'Check-in successful'
