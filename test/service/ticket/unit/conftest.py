"""
Unit test configuration for the ticket service.

Overrides the autouse database fixture from the root conftest so unit tests
run without touching SQLite.
"""

from collections.abc import AsyncGenerator

import pytest

from nft_ticketing.service.ticket.app.service.credential_issuer import CredentialIssuer
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.driven_adapter.crypto.secp256k1_credential_signer import (
    Secp256k1CredentialSigner,
)
from test.service.ticket.unit.helpers import TEST_SIGNING_KEY, FakeUnitOfWork


@pytest.fixture(autouse=True, scope='function')
async def clean_database() -> AsyncGenerator[None, None]:
    """No-op override for unit tests - no real database needed"""
    yield


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def signer() -> Secp256k1CredentialSigner:
    return Secp256k1CredentialSigner(private_key_hex=TEST_SIGNING_KEY)


@pytest.fixture
def credential_issuer(signer: Secp256k1CredentialSigner) -> CredentialIssuer:
    return CredentialIssuer(
        signer=signer,
        max_age_seconds=24 * 60 * 60,
        clock_skew_seconds=5 * 60,
        refresh_after_seconds=12 * 60 * 60,
    )


@pytest.fixture
def inventory_ledger() -> InventoryLedger:
    return InventoryLedger()
