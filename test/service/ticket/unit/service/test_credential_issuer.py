"""
Unit tests for CredentialIssuer with the real secp256k1 signer

Covers signing, signature verification and freshness windows.
"""

from datetime import timedelta

import attrs
import pytest

from nft_ticketing.platform.exception.exceptions import InvalidArgumentError
from nft_ticketing.service.ticket.app.service.credential_issuer import CredentialIssuer
from nft_ticketing.service.ticket.domain.value_object.check_in_credential import (
    CheckInCredential,
)
from nft_ticketing.service.ticket.driven_adapter.crypto.secp256k1_credential_signer import (
    Secp256k1CredentialSigner,
)
from test.service.ticket.unit.helpers import TEST_SIGNER_ADDRESS, make_minted_ticket, utc_now


@pytest.mark.unit
class TestSecp256k1CredentialSigner:
    def test_address_is_derived_from_key(self, signer: Secp256k1CredentialSigner) -> None:
        assert signer.address == TEST_SIGNER_ADDRESS

    def test_signature_recovers_signer(self, signer: Secp256k1CredentialSigner) -> None:
        signature = signer.sign_message('hello')

        assert signature.startswith('0x')
        assert len(signature) == 2 + 65 * 2
        assert signer.recover_addresses('hello', signature) == [signer.address]
        assert signer.verify('hello', signature, signer.address.upper())

    def test_signature_is_deterministic(self, signer: Secp256k1CredentialSigner) -> None:
        assert signer.sign_message('hello') == signer.sign_message('hello')

    def test_other_message_does_not_verify(self, signer: Secp256k1CredentialSigner) -> None:
        signature = signer.sign_message('hello')

        assert not signer.verify('hello!', signature, signer.address)

    @pytest.mark.parametrize('signature', ['0xnothex', '0x' + 'ab' * 10, ''])
    def test_malformed_signature_recovers_nothing(
        self, signer: Secp256k1CredentialSigner, signature: str
    ) -> None:
        assert signer.recover_addresses('hello', signature) == []

    def test_invalid_private_key(self) -> None:
        with pytest.raises(InvalidArgumentError, match='not a valid secp256k1 private key'):
            Secp256k1CredentialSigner(private_key_hex='1234')


@pytest.mark.unit
class TestCredentialIssuer:
    def test_issued_credential_verifies(self, credential_issuer: CredentialIssuer) -> None:
        now = utc_now()

        credential = credential_issuer.issue(ticket=make_minted_ticket(), now=now)
        scanned = CheckInCredential.from_json(credential.to_json())

        credential_issuer.verify_signature(credential=scanned)
        credential_issuer.verify_freshness(credential=scanned, now=now + timedelta(hours=1))
        assert scanned.signer == TEST_SIGNER_ADDRESS

    def test_tampered_owner_is_rejected(self, credential_issuer: CredentialIssuer) -> None:
        credential = credential_issuer.issue(ticket=make_minted_ticket(), now=utc_now())
        scanned = CheckInCredential.from_json(credential.to_json())
        forged = attrs.evolve(
            scanned, owner_address='0x' + '99' * 20, embedded_message=''
        )
        forged = attrs.evolve(forged, embedded_message=forged.message)

        with pytest.raises(InvalidArgumentError, match='Invalid QR code signature'):
            credential_issuer.verify_signature(credential=forged)

    def test_mismatched_message_is_rejected(self, credential_issuer: CredentialIssuer) -> None:
        credential = credential_issuer.issue(ticket=make_minted_ticket(), now=utc_now())
        scanned = attrs.evolve(
            CheckInCredential.from_json(credential.to_json()), embedded_message='other'
        )

        with pytest.raises(InvalidArgumentError, match='does not match its fields'):
            credential_issuer.verify_signature(credential=scanned)

    def test_foreign_signer_is_rejected(self, credential_issuer: CredentialIssuer) -> None:
        foreign = Secp256k1CredentialSigner(private_key_hex='11' * 32)
        credential = CredentialIssuer(signer=foreign).issue(
            ticket=make_minted_ticket(), now=utc_now()
        )

        with pytest.raises(InvalidArgumentError, match='not signed by this service'):
            credential_issuer.verify_signature(
                credential=CheckInCredential.from_json(credential.to_json())
            )

    def test_credential_older_than_max_age_is_expired(
        self, credential_issuer: CredentialIssuer
    ) -> None:
        issued_at = utc_now() - timedelta(hours=25)
        credential = credential_issuer.issue(ticket=make_minted_ticket(), now=issued_at)

        with pytest.raises(InvalidArgumentError, match='QR code expired'):
            credential_issuer.verify_freshness(credential=credential, now=utc_now())

    def test_small_clock_skew_is_tolerated(self, credential_issuer: CredentialIssuer) -> None:
        now = utc_now()
        credential = credential_issuer.issue(
            ticket=make_minted_ticket(), now=now + timedelta(minutes=4)
        )

        credential_issuer.verify_freshness(credential=credential, now=now)

    def test_future_timestamp_beyond_skew(self, credential_issuer: CredentialIssuer) -> None:
        now = utc_now()
        credential = credential_issuer.issue(
            ticket=make_minted_ticket(), now=now + timedelta(minutes=10)
        )

        with pytest.raises(InvalidArgumentError, match='timestamp is in the future'):
            credential_issuer.verify_freshness(credential=credential, now=now)

    def test_needs_refresh(self, credential_issuer: CredentialIssuer) -> None:
        now = utc_now()
        fresh = credential_issuer.issue(ticket=make_minted_ticket(), now=now).to_json()
        stale = credential_issuer.issue(
            ticket=make_minted_ticket(), now=now - timedelta(hours=13)
        ).to_json()

        assert credential_issuer.needs_refresh(stored='', now=now)
        assert credential_issuer.needs_refresh(stored='garbage', now=now)
        assert credential_issuer.needs_refresh(stored=stale, now=now)
        assert not credential_issuer.needs_refresh(stored=fresh, now=now)
