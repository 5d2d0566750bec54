from datetime import datetime

from nft_ticketing.platform.config.core_setting import settings
from nft_ticketing.platform.exception.exceptions import InvalidArgumentError
from nft_ticketing.service.ticket.app.interface.i_credential_signer import ICredentialSigner
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket
from nft_ticketing.service.ticket.domain.value_object.check_in_credential import (
    CheckInCredential,
)


class CredentialIssuer:
    """Signs check-in credentials and checks the ones that come back from a scan."""

    def __init__(
        self,
        *,
        signer: ICredentialSigner,
        max_age_seconds: int = settings.CHECKIN_CREDENTIAL_MAX_AGE_SECONDS,
        clock_skew_seconds: int = settings.CHECKIN_CLOCK_SKEW_SECONDS,
        refresh_after_seconds: int = settings.CHECKIN_CREDENTIAL_REFRESH_SECONDS,
    ) -> None:
        self.signer = signer
        self.max_age_seconds = max_age_seconds
        self.clock_skew_seconds = clock_skew_seconds
        self.refresh_after_seconds = refresh_after_seconds

    def issue(self, *, ticket: Ticket, now: datetime) -> CheckInCredential:
        credential = CheckInCredential.build(
            ticket_id=ticket.id,
            event_id=ticket.event_id,
            owner_address=ticket.owner_address,
            issued_at=now,
        )
        return credential.signed(
            signature=self.signer.sign_message(credential.message), signer=self.signer.address
        )

    def needs_refresh(self, *, stored: str, now: datetime) -> bool:
        if not stored:
            return True
        try:
            credential = CheckInCredential.from_json(stored)
        except InvalidArgumentError:
            return True
        return credential.age_seconds(now) > self.refresh_after_seconds

    def verify_signature(self, *, credential: CheckInCredential) -> None:
        if not credential.message_matches:
            raise InvalidArgumentError('QR code message does not match its fields')
        if credential.signer.lower() != self.signer.address:
            raise InvalidArgumentError('QR code was not signed by this service')
        if not self.signer.verify(credential.message, credential.signature, credential.signer):
            raise InvalidArgumentError('Invalid QR code signature')

    def verify_freshness(self, *, credential: CheckInCredential, now: datetime) -> None:
        age = credential.age_seconds(now)
        if age > self.max_age_seconds:
            raise InvalidArgumentError('QR code expired; generate a new one')
        if age < -self.clock_skew_seconds:
            raise InvalidArgumentError('QR code expired; timestamp is in the future')
