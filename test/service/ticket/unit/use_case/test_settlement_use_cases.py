"""
Unit tests for event settlement and the settlement summary
"""

import pytest

from nft_ticketing.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from nft_ticketing.service.ticket.app.command.process_event_settlement_use_case import (
    ProcessEventSettlementUseCase,
)
from nft_ticketing.service.ticket.app.dto.page_dto import PageRequest
from nft_ticketing.service.ticket.app.query.get_settlement_use_case import GetSettlementUseCase
from nft_ticketing.service.ticket.domain.entity.platform_transaction_entity import (
    MANUAL_SETTLEMENT,
    PlatformTransaction,
)
from nft_ticketing.service.ticket.domain.enum.ledger_status import PlatformTransactionStatus
from nft_ticketing.service.ticket.domain.value_object.fee_split import FeeSplit
from test.service.ticket.unit.helpers import (
    BUYER,
    EVENT_ID,
    PURCHASE_ID,
    TX_HASH,
    FakeUnitOfWork,
    utc_now,
)


def _transaction(amount_wei: int, status: PlatformTransactionStatus) -> PlatformTransaction:
    received = PlatformTransaction.received(
        transaction_hash=TX_HASH,
        purchase_id=PURCHASE_ID,
        event_id=EVENT_ID,
        event_organizer_id='org-1',
        buyer_address=BUYER,
        split=FeeSplit.compute(amount_wei=amount_wei, fee_percent=10),
        now=utc_now(),
    )
    received.status = status
    return received


@pytest.mark.unit
class TestProcessEventSettlementUseCase:
    @pytest.mark.asyncio
    async def test_settles_received_transactions(self, uow: FakeUnitOfWork) -> None:
        # Arrange
        settled = [
            _transaction(2000, PlatformTransactionStatus.SETTLED),
            _transaction(1000, PlatformTransactionStatus.SETTLED),
        ]
        uow.ledger_repo.settle_received.return_value = settled
        use_case = ProcessEventSettlementUseCase(uow=uow)

        # Act
        result = await use_case.execute(event_id=EVENT_ID, settlement_transaction_hash='0xpayout')

        # Assert
        assert result.settled_count == 2
        assert result.organizer_amount_wei == '2700'
        assert result.settlement_transaction_hash == '0xpayout'
        assert result.settled_transaction_ids == [tx.id for tx in settled]
        assert uow.committed

    @pytest.mark.asyncio
    async def test_hash_defaults_to_manual_marker(self, uow: FakeUnitOfWork) -> None:
        uow.ledger_repo.settle_received.return_value = [
            _transaction(100, PlatformTransactionStatus.SETTLED)
        ]

        result = await ProcessEventSettlementUseCase(uow=uow).execute(
            event_id=EVENT_ID, settlement_transaction_hash='  '
        )

        assert result.settlement_transaction_hash == MANUAL_SETTLEMENT
        assert (
            uow.ledger_repo.settle_received.await_args.kwargs['settlement_transaction_hash']
            == MANUAL_SETTLEMENT
        )

    @pytest.mark.asyncio
    async def test_nothing_to_settle(self, uow: FakeUnitOfWork) -> None:
        uow.ledger_repo.settle_received.return_value = []

        with pytest.raises(NotFoundError, match='No pending transactions'):
            await ProcessEventSettlementUseCase(uow=uow).execute(event_id=EVENT_ID)
        assert not uow.committed


@pytest.mark.unit
class TestGetSettlementUseCase:
    @pytest.mark.asyncio
    async def test_summary_splits_received_and_settled(self, uow: FakeUnitOfWork) -> None:
        uow.ledger_repo.list_platform_transactions.return_value = [
            _transaction(2000, PlatformTransactionStatus.RECEIVED),
            _transaction(1000, PlatformTransactionStatus.RECEIVED),
            _transaction(500, PlatformTransactionStatus.SETTLED),
        ]

        summary = await GetSettlementUseCase(uow=uow).get_summary(event_id=EVENT_ID)

        assert summary.received.count == 2
        assert summary.received.amount_wei == '3000'
        assert summary.received.platform_fee_wei == '300'
        assert summary.received.organizer_amount_wei == '2700'
        assert summary.settled.count == 1
        assert summary.settled.organizer_amount_wei == '450'

    @pytest.mark.asyncio
    async def test_wei_totals_exceed_64_bits(self, uow: FakeUnitOfWork) -> None:
        big = 5 * 10**20
        uow.ledger_repo.list_platform_transactions.return_value = [
            _transaction(big, PlatformTransactionStatus.RECEIVED),
            _transaction(big, PlatformTransactionStatus.RECEIVED),
        ]

        summary = await GetSettlementUseCase(uow=uow).get_summary(event_id=EVENT_ID)

        assert summary.received.amount_wei == str(2 * big)

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_status(self, uow: FakeUnitOfWork) -> None:
        with pytest.raises(InvalidArgumentError, match='Unknown platform transaction status'):
            await GetSettlementUseCase(uow=uow).list_platform_transactions(
                page=PageRequest.parse(), status='paid'
            )

    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, uow: FakeUnitOfWork) -> None:
        uow.ledger_repo.list_platform_transactions.return_value = []

        page = await GetSettlementUseCase(uow=uow).list_platform_transactions(
            page=PageRequest.parse(page_size=5), event_id=EVENT_ID, status='settled'
        )

        assert page.items == []
        uow.ledger_repo.list_platform_transactions.assert_awaited_once_with(
            event_ids=[EVENT_ID],
            status=PlatformTransactionStatus.SETTLED,
            limit=6,
            offset=0,
        )
