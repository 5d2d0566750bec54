from typing import Callable
from unittest.mock import AsyncMock, Mock

import pytest

from nft_ticketing.platform.database.orm_db_setting import Database
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork, SqlAlchemyUnitOfWork
from nft_ticketing.service.ticket.app.dto.blockchain_dto import (
    PaymentDetails,
    TransactionVerification,
)
from nft_ticketing.service.ticket.app.service.credential_issuer import CredentialIssuer
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType
from nft_ticketing.service.ticket.driven_adapter.crypto.secp256k1_credential_signer import (
    Secp256k1CredentialSigner,
)
from test.service.ticket.unit.helpers import (
    BUYER,
    PAYMENT_CONTRACT,
    TEST_SIGNING_KEY,
    make_event,
    make_ticket_type,
)


UowFactory = Callable[[], AbstractUnitOfWork]


@pytest.fixture
def uow_factory() -> UowFactory:
    database = Database()
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.new_session)


@pytest.fixture
def inventory_ledger() -> InventoryLedger:
    return InventoryLedger()


@pytest.fixture
def credential_issuer() -> CredentialIssuer:
    return CredentialIssuer(
        signer=Secp256k1CredentialSigner(private_key_hex=TEST_SIGNING_KEY),
        max_age_seconds=24 * 60 * 60,
        clock_skew_seconds=5 * 60,
        refresh_after_seconds=12 * 60 * 60,
    )


@pytest.fixture
def mock_blockchain_client() -> Mock:
    client = AsyncMock()
    client.get_ticket_payment_details = AsyncMock(
        return_value=PaymentDetails(payment_contract_address=PAYMENT_CONTRACT, price_wei='1000')
    )
    client.verify_transaction = AsyncMock(
        return_value=TransactionVerification(
            is_confirmed=True,
            success_on_chain=True,
            from_address=BUYER,
            to_address=PAYMENT_CONTRACT,
            value_wei='2000',
            block_number=77,
        )
    )
    return client


@pytest.fixture
def mock_event_client() -> Mock:
    client = AsyncMock()
    client.get_event = AsyncMock(return_value=make_event())
    return client


@pytest.fixture
async def published_ticket_type(uow_factory: UowFactory) -> TicketType:
    """Published type with 5 tickets, stored through the real repository"""
    ticket_type = make_ticket_type()
    async with uow_factory() as uow:
        await uow.ticket_type_repo.create(ticket_type=ticket_type)
        await uow.commit()
    return ticket_type
