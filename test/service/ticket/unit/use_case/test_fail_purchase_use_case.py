"""
Unit tests for FailPurchaseUseCase
"""

import pytest

from nft_ticketing.platform.exception.exceptions import FailedPreconditionError, NotFoundError
from nft_ticketing.service.ticket.app.command.fail_purchase_use_case import FailPurchaseUseCase
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from test.service.ticket.unit.helpers import (
    PURCHASE_ID,
    TICKET_TYPE_ID,
    FakeUnitOfWork,
    make_purchase,
    make_ticket_type,
)


@pytest.fixture
def fail_purchase_use_case(
    uow: FakeUnitOfWork, inventory_ledger: InventoryLedger
) -> FailPurchaseUseCase:
    return FailPurchaseUseCase(uow=uow, inventory_ledger=inventory_ledger)


@pytest.mark.unit
class TestFailPurchaseUseCase:
    @pytest.mark.asyncio
    async def test_releases_held_tickets(
        self, fail_purchase_use_case: FailPurchaseUseCase, uow: FakeUnitOfWork
    ) -> None:
        # Arrange
        uow.purchase_repo.get_by_id.return_value = make_purchase()
        uow.purchase_repo.fail_if_initiated.return_value = True
        uow.ticket_type_repo.get_by_id_for_update.return_value = make_ticket_type()
        uow.ticket_repo.delete_pending_by_purchase.return_value = 2

        # Act
        purchase = await fail_purchase_use_case.execute(
            purchase_id=PURCHASE_ID, reason='wallet rejected'
        )

        # Assert
        assert purchase.status == PurchaseStatus.FAILED
        assert purchase.failure_reason == 'wallet rejected'
        uow.ticket_repo.delete_pending_by_purchase.assert_awaited_once_with(purchase_id=PURCHASE_ID)
        uow.ticket_type_repo.set_available_quantity.assert_awaited_once_with(
            ticket_type_id=TICKET_TYPE_ID, available_quantity=5
        )
        assert uow.committed

    @pytest.mark.asyncio
    async def test_blank_reason_gets_default(
        self, fail_purchase_use_case: FailPurchaseUseCase, uow: FakeUnitOfWork
    ) -> None:
        uow.purchase_repo.get_by_id.return_value = make_purchase()
        uow.purchase_repo.fail_if_initiated.return_value = True
        uow.ticket_type_repo.get_by_id_for_update.return_value = None
        uow.ticket_repo.delete_pending_by_purchase.return_value = 2

        purchase = await fail_purchase_use_case.execute(purchase_id=PURCHASE_ID, reason='  ')

        assert purchase.failure_reason == 'Payment failed'

    @pytest.mark.asyncio
    async def test_confirmed_purchase_cannot_fail(
        self, fail_purchase_use_case: FailPurchaseUseCase, uow: FakeUnitOfWork
    ) -> None:
        uow.purchase_repo.get_by_id.return_value = make_purchase(status=PurchaseStatus.CONFIRMED)

        with pytest.raises(FailedPreconditionError):
            await fail_purchase_use_case.execute(purchase_id=PURCHASE_ID, reason='late')
        uow.ticket_repo.delete_pending_by_purchase.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_race_is_failed_precondition(
        self, fail_purchase_use_case: FailPurchaseUseCase, uow: FakeUnitOfWork
    ) -> None:
        uow.purchase_repo.get_by_id.return_value = make_purchase()
        uow.purchase_repo.fail_if_initiated.return_value = False

        with pytest.raises(FailedPreconditionError, match='changed state'):
            await fail_purchase_use_case.execute(purchase_id=PURCHASE_ID, reason='x')
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_unknown_purchase(
        self, fail_purchase_use_case: FailPurchaseUseCase, uow: FakeUnitOfWork
    ) -> None:
        uow.purchase_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await fail_purchase_use_case.execute(purchase_id='missing', reason='x')
