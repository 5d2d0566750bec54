"""
Unit tests for CheckInUseCase

Check order: payload shape, stored credential, signature, age, ticket state,
on-chain ownership, conditional check-in update.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import orjson
import pytest

from nft_ticketing.platform.exception.exceptions import (
    AlreadyExistsError,
    FailedPreconditionError,
    InvalidArgumentError,
    NotFoundError,
)
from nft_ticketing.service.ticket.app.command.check_in_use_case import CheckInUseCase
from nft_ticketing.service.ticket.app.dto.blockchain_dto import TokenOwnership
from nft_ticketing.service.ticket.app.service.credential_issuer import CredentialIssuer
from nft_ticketing.service.ticket.domain.enum.ticket_status import CheckInStatus
from test.service.ticket.unit.helpers import (
    BUYER,
    OTHER_WALLET,
    FakeUnitOfWork,
    make_minted_ticket,
    utc_now,
)


@pytest.fixture
def mock_blockchain_client() -> Mock:
    client = AsyncMock()
    client.verify_token_ownership = AsyncMock(
        return_value=TokenOwnership(is_valid_owner=True, actual_owner=BUYER)
    )
    return client


@pytest.fixture
def check_in_use_case(
    uow: FakeUnitOfWork, mock_blockchain_client: Mock, credential_issuer: CredentialIssuer
) -> CheckInUseCase:
    return CheckInUseCase(
        uow=uow, blockchain_client=mock_blockchain_client, credential_issuer=credential_issuer
    )


@pytest.fixture
def qr_code_data(uow: FakeUnitOfWork, credential_issuer: CredentialIssuer) -> str:
    """Credential stored on a minted ticket, as a scanner would read it"""
    data = credential_issuer.issue(ticket=make_minted_ticket(), now=utc_now()).to_json()
    uow.ticket_repo.get_by_qr_code_secret.return_value = make_minted_ticket(qr_code_secret=data)
    uow.ticket_repo.check_in_if_not_checked.return_value = True
    return data


@pytest.mark.unit
class TestCheckInUseCase:
    @pytest.mark.asyncio
    async def test_admits_valid_credential(
        self,
        check_in_use_case: CheckInUseCase,
        uow: FakeUnitOfWork,
        mock_blockchain_client: Mock,
        qr_code_data: str,
    ) -> None:
        # Act
        result = await check_in_use_case.execute(
            qr_code_data=qr_code_data, location='Gate A', scanner_id='scanner-7'
        )

        # Assert
        assert result.message == 'Check-in successful'
        assert result.ticket.check_in_status == CheckInStatus.CHECKED_IN
        assert result.ticket.check_in_location == 'Gate A'
        mock_blockchain_client.verify_token_ownership.assert_awaited_once_with(
            token_id='100', expected_owner=BUYER
        )
        uow.ticket_repo.check_in_if_not_checked.assert_awaited_once()
        assert uow.committed

    @pytest.mark.asyncio
    async def test_payload_is_looked_up_canonically(
        self, check_in_use_case: CheckInUseCase, uow: FakeUnitOfWork, qr_code_data: str
    ) -> None:
        # Scanner re-encodes with whitespace and a different key order
        rescanned = orjson.dumps(
            dict(reversed(list(orjson.loads(qr_code_data).items()))),
            option=orjson.OPT_INDENT_2,
        )

        await check_in_use_case.execute(qr_code_data=rescanned.decode())

        uow.ticket_repo.get_by_qr_code_secret.assert_awaited_once_with(qr_code_secret=qr_code_data)

    @pytest.mark.asyncio
    async def test_second_scan_is_already_exists(
        self, check_in_use_case: CheckInUseCase, uow: FakeUnitOfWork, qr_code_data: str
    ) -> None:
        uow.ticket_repo.get_by_qr_code_secret.return_value = make_minted_ticket(
            qr_code_secret=qr_code_data
        ).check_in(location='Gate A', scanner_id='', now=utc_now())

        with pytest.raises(AlreadyExistsError, match='already checked in'):
            await check_in_use_case.execute(qr_code_data=qr_code_data)
        uow.ticket_repo.check_in_if_not_checked.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_scan_loses_conditional_update(
        self, check_in_use_case: CheckInUseCase, uow: FakeUnitOfWork, qr_code_data: str
    ) -> None:
        uow.ticket_repo.check_in_if_not_checked.return_value = False

        with pytest.raises(AlreadyExistsError):
            await check_in_use_case.execute(qr_code_data=qr_code_data)
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_unknown_credential(
        self, check_in_use_case: CheckInUseCase, uow: FakeUnitOfWork, qr_code_data: str
    ) -> None:
        uow.ticket_repo.get_by_qr_code_secret.return_value = None

        with pytest.raises(NotFoundError, match='No ticket matches'):
            await check_in_use_case.execute(qr_code_data=qr_code_data)

    @pytest.mark.asyncio
    async def test_forged_signature(
        self, check_in_use_case: CheckInUseCase, uow: FakeUnitOfWork, qr_code_data: str
    ) -> None:
        # Arrange - stored copy carries the forged signature too
        payload = orjson.loads(qr_code_data)
        payload['signature'] = '0x' + 'ab' * 65
        forged = orjson.dumps(payload, option=orjson.OPT_SORT_KEYS).decode()
        uow.ticket_repo.get_by_qr_code_secret.return_value = make_minted_ticket(
            qr_code_secret=forged
        )

        # Act & Assert
        with pytest.raises(InvalidArgumentError, match='Invalid QR code signature'):
            await check_in_use_case.execute(qr_code_data=forged)

    @pytest.mark.asyncio
    async def test_expired_credential(
        self,
        check_in_use_case: CheckInUseCase,
        uow: FakeUnitOfWork,
        credential_issuer: CredentialIssuer,
    ) -> None:
        data = credential_issuer.issue(
            ticket=make_minted_ticket(), now=utc_now() - timedelta(hours=25)
        ).to_json()
        uow.ticket_repo.get_by_qr_code_secret.return_value = make_minted_ticket(qr_code_secret=data)

        with pytest.raises(InvalidArgumentError, match='QR code expired'):
            await check_in_use_case.execute(qr_code_data=data)

    @pytest.mark.asyncio
    async def test_transferred_token_is_rejected(
        self,
        check_in_use_case: CheckInUseCase,
        mock_blockchain_client: Mock,
        qr_code_data: str,
    ) -> None:
        mock_blockchain_client.verify_token_ownership.return_value = TokenOwnership(
            is_valid_owner=False, actual_owner=OTHER_WALLET
        )

        with pytest.raises(FailedPreconditionError, match='no longer owned'):
            await check_in_use_case.execute(qr_code_data=qr_code_data)

    @pytest.mark.asyncio
    async def test_malformed_payload(self, check_in_use_case: CheckInUseCase) -> None:
        with pytest.raises(InvalidArgumentError, match='not valid JSON'):
            await check_in_use_case.execute(qr_code_data='{broken')
