"""
Check-in credential carried in a ticket's QR code.

The payload is canonical JSON (sorted keys, compact) so the stored copy and a
re-serialized scan compare equal byte for byte.
"""

from datetime import datetime
import secrets
from typing import Any

import attrs
import orjson

from nft_ticketing.platform.exception.exceptions import InvalidArgumentError


MESSAGE_PREFIX = 'nft-ticket-checkin'
REQUIRED_FIELDS = (
    'ticketId',
    'eventId',
    'ownerAddress',
    'timestamp',
    'nonce',
    'message',
    'signature',
    'signer',
)


@attrs.frozen
class CheckInCredential:
    ticket_id: str
    event_id: str
    owner_address: str
    timestamp: int
    nonce: str
    signature: str = ''
    signer: str = ''
    # Message as it appeared in a scanned payload; empty for freshly built credentials
    embedded_message: str = ''

    @classmethod
    def build(
        cls, *, ticket_id: str, event_id: str, owner_address: str, issued_at: datetime
    ) -> 'CheckInCredential':
        return cls(
            ticket_id=ticket_id,
            event_id=event_id,
            owner_address=owner_address.lower(),
            timestamp=int(issued_at.timestamp()),
            nonce=secrets.token_hex(16),
        )

    @property
    def message(self) -> str:
        return '|'.join(
            (
                MESSAGE_PREFIX,
                self.ticket_id,
                self.event_id,
                self.owner_address,
                str(self.timestamp),
                self.nonce,
            )
        )

    @property
    def message_matches(self) -> bool:
        return self.embedded_message == self.message

    def signed(self, *, signature: str, signer: str) -> 'CheckInCredential':
        return attrs.evolve(self, signature=signature, signer=signer.lower())

    def age_seconds(self, now: datetime) -> float:
        return now.timestamp() - self.timestamp

    def to_payload(self) -> dict[str, Any]:
        return {
            'ticketId': self.ticket_id,
            'eventId': self.event_id,
            'ownerAddress': self.owner_address,
            'timestamp': self.timestamp,
            'nonce': self.nonce,
            'message': self.message,
            'signature': self.signature,
            'signer': self.signer,
        }

    def to_json(self) -> str:
        return orjson.dumps(self.to_payload(), option=orjson.OPT_SORT_KEYS).decode()

    @classmethod
    def from_json(cls, raw: str | bytes) -> 'CheckInCredential':
        try:
            payload = orjson.loads(raw)
        except orjson.JSONDecodeError:
            raise InvalidArgumentError('QR code data is not valid JSON')

        if not isinstance(payload, dict):
            raise InvalidArgumentError('QR code data must be a JSON object')

        missing = [field for field in REQUIRED_FIELDS if field not in payload]
        if missing:
            raise InvalidArgumentError(f'QR code data is missing fields: {", ".join(missing)}')

        timestamp = payload['timestamp']
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise InvalidArgumentError('QR code timestamp must be an integer')
        for field in REQUIRED_FIELDS:
            if field != 'timestamp' and not isinstance(payload[field], str):
                raise InvalidArgumentError(f'QR code field {field} must be a string')

        return cls(
            ticket_id=payload['ticketId'],
            event_id=payload['eventId'],
            owner_address=payload['ownerAddress'],
            timestamp=timestamp,
            nonce=payload['nonce'],
            signature=payload['signature'],
            signer=payload['signer'],
            embedded_message=payload['message'],
        )
