"""
Unit tests for the purchase, ticket and check-in transition tables
"""

import pytest

from nft_ticketing.platform.exception.exceptions import FailedPreconditionError
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from nft_ticketing.service.ticket.domain.enum.ticket_status import CheckInStatus, TicketStatus
from nft_ticketing.service.ticket.domain.state_machine import (
    CHECK_IN_STATE_MACHINE,
    PURCHASE_STATE_MACHINE,
    TICKET_STATE_MACHINE,
)


@pytest.mark.unit
class TestPurchaseStateMachine:
    @pytest.mark.parametrize(
        'target', [PurchaseStatus.CONFIRMED, PurchaseStatus.EXPIRED, PurchaseStatus.FAILED]
    )
    def test_initiated_can_leave_to_every_terminal_state(self, target: PurchaseStatus) -> None:
        assert PURCHASE_STATE_MACHINE.ensure(PurchaseStatus.INITIATED, target) == target

    @pytest.mark.parametrize(
        'terminal', [PurchaseStatus.CONFIRMED, PurchaseStatus.EXPIRED, PurchaseStatus.FAILED]
    )
    def test_terminal_states_have_no_exit(self, terminal: PurchaseStatus) -> None:
        assert PURCHASE_STATE_MACHINE.is_terminal(terminal)
        with pytest.raises(FailedPreconditionError, match=f'Purchase is {terminal.value}'):
            PURCHASE_STATE_MACHINE.ensure(terminal, PurchaseStatus.INITIATED)

    def test_expired_purchase_cannot_be_confirmed(self) -> None:
        assert not PURCHASE_STATE_MACHINE.can(PurchaseStatus.EXPIRED, PurchaseStatus.CONFIRMED)


@pytest.mark.unit
class TestTicketStateMachine:
    def test_pending_payment_can_be_minted_directly(self) -> None:
        assert TICKET_STATE_MACHINE.can(TicketStatus.PENDING_PAYMENT, TicketStatus.MINTED)

    def test_mint_claim_can_be_released(self) -> None:
        assert TICKET_STATE_MACHINE.can(TicketStatus.MINTING, TicketStatus.PENDING_PAYMENT)
        assert not TICKET_STATE_MACHINE.can(TicketStatus.MINTING, TicketStatus.PAID)

    def test_minted_is_terminal(self) -> None:
        assert TICKET_STATE_MACHINE.is_terminal(TicketStatus.MINTED)
        with pytest.raises(FailedPreconditionError):
            TICKET_STATE_MACHINE.ensure(TicketStatus.MINTED, TicketStatus.PENDING_PAYMENT)

    @pytest.mark.parametrize(
        'historical', [TicketStatus.SOLD, TicketStatus.USED, TicketStatus.CANCELLED]
    )
    def test_historical_statuses_are_never_targets_or_sources(
        self, historical: TicketStatus
    ) -> None:
        assert not TICKET_STATE_MACHINE.can(TicketStatus.PENDING_PAYMENT, historical)
        assert not TICKET_STATE_MACHINE.can(historical, TicketStatus.MINTED)


@pytest.mark.unit
class TestCheckInStateMachine:
    def test_check_in_is_one_way(self) -> None:
        assert CHECK_IN_STATE_MACHINE.can(CheckInStatus.NOT_CHECKED_IN, CheckInStatus.CHECKED_IN)
        assert not CHECK_IN_STATE_MACHINE.can(
            CheckInStatus.CHECKED_IN, CheckInStatus.NOT_CHECKED_IN
        )
