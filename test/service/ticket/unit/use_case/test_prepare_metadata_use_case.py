"""
Unit tests for PrepareMetadataUseCase
"""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from nft_ticketing.platform.exception.exceptions import (
    DeadlineExceededError,
    FailedPreconditionError,
    InvalidArgumentError,
    NotFoundError,
)
from nft_ticketing.service.ticket.app.command.prepare_metadata_use_case import (
    PrepareMetadataUseCase,
)
from nft_ticketing.service.ticket.app.service.nft_metadata_builder import NftMetadataBuilder
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from test.service.ticket.unit.helpers import (
    PURCHASE_ID,
    FakeUnitOfWork,
    make_event,
    make_purchase,
    make_ticket_type,
    utc_now,
)


@pytest.fixture
def mock_event_client() -> Mock:
    client = AsyncMock()
    client.get_event = AsyncMock(return_value=make_event())
    return client


@pytest.fixture
def mock_ipfs_client() -> Mock:
    client = AsyncMock()
    client.pin_json = AsyncMock(side_effect=['bafy0', 'bafy1'])
    return client


@pytest.fixture
def prepare_metadata_use_case(
    uow: FakeUnitOfWork, mock_event_client: Mock, mock_ipfs_client: Mock
) -> PrepareMetadataUseCase:
    return PrepareMetadataUseCase(
        uow=uow,
        event_client=mock_event_client,
        ipfs_client=mock_ipfs_client,
        metadata_builder=NftMetadataBuilder(),
    )


@pytest.mark.unit
class TestPrepareMetadataUseCase:
    @pytest.mark.asyncio
    async def test_pins_one_document_per_ticket(
        self,
        prepare_metadata_use_case: PrepareMetadataUseCase,
        uow: FakeUnitOfWork,
        mock_ipfs_client: Mock,
    ) -> None:
        # Arrange
        uow.purchase_repo.get_by_id.return_value = make_purchase(quantity=2)
        uow.ticket_type_repo.get_by_id.return_value = make_ticket_type()
        uow.purchase_repo.update_metadata_uris.return_value = True

        # Act
        result = await prepare_metadata_use_case.execute(purchase_id=PURCHASE_ID)

        # Assert
        assert result.metadata_uris == ['ipfs://bafy0', 'ipfs://bafy1']
        assert mock_ipfs_client.pin_json.await_count == 2
        uow.purchase_repo.update_metadata_uris.assert_awaited_once_with(
            purchase_id=PURCHASE_ID, metadata_uris=['ipfs://bafy0', 'ipfs://bafy1']
        )
        assert uow.committed

    @pytest.mark.asyncio
    async def test_prepared_purchase_returns_stored_uris(
        self,
        prepare_metadata_use_case: PrepareMetadataUseCase,
        uow: FakeUnitOfWork,
        mock_ipfs_client: Mock,
    ) -> None:
        uow.purchase_repo.get_by_id.return_value = make_purchase(
            metadata_uris=['ipfs://a', 'ipfs://b']
        )

        result = await prepare_metadata_use_case.execute(purchase_id=PURCHASE_ID)

        assert result.metadata_uris == ['ipfs://a', 'ipfs://b']
        mock_ipfs_client.pin_json.assert_not_awaited()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_pin_failure_stores_nothing(
        self,
        prepare_metadata_use_case: PrepareMetadataUseCase,
        uow: FakeUnitOfWork,
        mock_ipfs_client: Mock,
    ) -> None:
        # Arrange - second pin times out
        uow.purchase_repo.get_by_id.return_value = make_purchase(quantity=2)
        uow.ticket_type_repo.get_by_id.return_value = make_ticket_type()
        mock_ipfs_client.pin_json.side_effect = [
            'bafy0',
            DeadlineExceededError('ipfs-service PinJSONToIPFS timed out'),
        ]

        # Act & Assert
        with pytest.raises(DeadlineExceededError):
            await prepare_metadata_use_case.execute(purchase_id=PURCHASE_ID)
        uow.purchase_repo.update_metadata_uris.assert_not_awaited()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_expired_purchase(
        self, prepare_metadata_use_case: PrepareMetadataUseCase, uow: FakeUnitOfWork
    ) -> None:
        uow.purchase_repo.get_by_id.return_value = make_purchase(
            expires_at=utc_now() - timedelta(minutes=1)
        )

        with pytest.raises(FailedPreconditionError, match='reservation expired'):
            await prepare_metadata_use_case.execute(purchase_id=PURCHASE_ID)

    @pytest.mark.asyncio
    async def test_purchase_expired_while_pinning_stores_nothing(
        self,
        prepare_metadata_use_case: PrepareMetadataUseCase,
        uow: FakeUnitOfWork,
        mock_ipfs_client: Mock,
    ) -> None:
        # Arrange - active on the first read, expired by the time URIs are stored
        uow.purchase_repo.get_by_id.side_effect = [
            make_purchase(quantity=2),
            make_purchase(quantity=2, expires_at=utc_now() - timedelta(seconds=1)),
        ]
        uow.ticket_type_repo.get_by_id.return_value = make_ticket_type()

        # Act & Assert
        with pytest.raises(FailedPreconditionError, match='reservation expired'):
            await prepare_metadata_use_case.execute(purchase_id=PURCHASE_ID)
        assert mock_ipfs_client.pin_json.await_count == 2
        uow.purchase_repo.update_metadata_uris.assert_not_awaited()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_confirmed_purchase(
        self, prepare_metadata_use_case: PrepareMetadataUseCase, uow: FakeUnitOfWork
    ) -> None:
        uow.purchase_repo.get_by_id.return_value = make_purchase(status=PurchaseStatus.CONFIRMED)

        with pytest.raises(FailedPreconditionError, match='expected INITIATED'):
            await prepare_metadata_use_case.execute(purchase_id=PURCHASE_ID)

    @pytest.mark.asyncio
    async def test_quantity_mismatch(
        self, prepare_metadata_use_case: PrepareMetadataUseCase, uow: FakeUnitOfWork
    ) -> None:
        uow.purchase_repo.get_by_id.return_value = make_purchase(quantity=2)

        with pytest.raises(InvalidArgumentError, match='does not match purchase quantity 2'):
            await prepare_metadata_use_case.execute(purchase_id=PURCHASE_ID, quantity=3)

    @pytest.mark.asyncio
    async def test_unknown_purchase(
        self, prepare_metadata_use_case: PrepareMetadataUseCase, uow: FakeUnitOfWork
    ) -> None:
        uow.purchase_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await prepare_metadata_use_case.execute(purchase_id='missing')
