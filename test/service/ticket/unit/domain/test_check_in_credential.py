"""
Unit tests for the QR check-in credential payload
"""

from datetime import datetime, timezone

import orjson
import pytest

from nft_ticketing.platform.exception.exceptions import InvalidArgumentError
from nft_ticketing.service.ticket.domain.value_object.check_in_credential import (
    CheckInCredential,
)
from test.service.ticket.unit.helpers import BUYER, EVENT_ID


ISSUED_AT = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def credential() -> CheckInCredential:
    return CheckInCredential.build(
        ticket_id='ticket-0', event_id=EVENT_ID, owner_address=BUYER.upper(), issued_at=ISSUED_AT
    ).signed(signature='0xsig', signer='0xSIGNER')


@pytest.mark.unit
class TestCheckInCredential:
    def test_message_joins_fields_in_fixed_order(self, credential: CheckInCredential) -> None:
        parts = credential.message.split('|')

        assert parts[0] == 'nft-ticket-checkin'
        assert parts[1:5] == ['ticket-0', EVENT_ID, BUYER, str(credential.timestamp)]
        assert parts[5] == credential.nonce

    def test_nonce_is_random_per_build(self) -> None:
        first = CheckInCredential.build(
            ticket_id='t', event_id='e', owner_address=BUYER, issued_at=ISSUED_AT
        )
        second = CheckInCredential.build(
            ticket_id='t', event_id='e', owner_address=BUYER, issued_at=ISSUED_AT
        )

        assert first.nonce != second.nonce
        assert len(first.nonce) == 32

    def test_json_is_canonical(self, credential: CheckInCredential) -> None:
        raw = credential.to_json()
        payload = orjson.loads(raw)

        assert list(payload) == sorted(payload)
        assert ' ' not in raw
        assert payload['signer'] == '0xsigner'
        assert payload['message'] == credential.message

    def test_parsed_payload_reserializes_identically(self, credential: CheckInCredential) -> None:
        raw = credential.to_json()

        parsed = CheckInCredential.from_json(raw)

        assert parsed.to_json() == raw
        assert parsed.message_matches

    def test_tampered_field_no_longer_matches_message(self, credential: CheckInCredential) -> None:
        payload = orjson.loads(credential.to_json())
        payload['ticketId'] = 'ticket-9'

        parsed = CheckInCredential.from_json(orjson.dumps(payload))

        assert not parsed.message_matches

    @pytest.mark.parametrize(
        'raw, error',
        [
            ('not json', 'not valid JSON'),
            ('[1, 2]', 'must be a JSON object'),
            ('{"ticketId": "t"}', 'missing fields'),
        ],
    )
    def test_malformed_payloads(self, raw: str, error: str) -> None:
        with pytest.raises(InvalidArgumentError, match=error):
            CheckInCredential.from_json(raw)

    def test_timestamp_must_be_an_integer(self, credential: CheckInCredential) -> None:
        payload = orjson.loads(credential.to_json())
        payload['timestamp'] = str(payload['timestamp'])

        with pytest.raises(InvalidArgumentError, match='timestamp must be an integer'):
            CheckInCredential.from_json(orjson.dumps(payload))

    def test_age_is_measured_from_issue_time(self, credential: CheckInCredential) -> None:
        later = datetime(2030, 1, 1, 13, 0, tzinfo=timezone.utc)

        assert credential.age_seconds(later) == 3600
