"""
Status transition tables for purchases and tickets.

Every status change in the domain goes through ``StateMachine.ensure`` so an
illegal move is rejected in one place with the current state in the message.
"""

from enum import StrEnum
from typing import Generic, Mapping, TypeVar

from nft_ticketing.platform.exception.exceptions import FailedPreconditionError
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from nft_ticketing.service.ticket.domain.enum.ticket_status import CheckInStatus, TicketStatus


_S = TypeVar('_S', bound=StrEnum)


class StateMachine(Generic[_S]):
    def __init__(self, *, name: str, transitions: Mapping[_S, frozenset[_S]]) -> None:
        self.name = name
        self._transitions = transitions

    def can(self, current: _S, target: _S) -> bool:
        return target in self._transitions.get(current, frozenset())

    def ensure(self, current: _S, target: _S) -> _S:
        if not self.can(current, target):
            raise FailedPreconditionError(
                f'{self.name} is {current.value}; cannot move to {target.value}'
            )
        return target

    def is_terminal(self, state: _S) -> bool:
        return not self._transitions.get(state)


PURCHASE_STATE_MACHINE: StateMachine[PurchaseStatus] = StateMachine(
    name='Purchase',
    transitions={
        PurchaseStatus.INITIATED: frozenset(
            {PurchaseStatus.CONFIRMED, PurchaseStatus.EXPIRED, PurchaseStatus.FAILED}
        ),
        PurchaseStatus.CONFIRMED: frozenset(),
        PurchaseStatus.EXPIRED: frozenset(),
        PurchaseStatus.FAILED: frozenset(),
    },
)

# Historical statuses have no outgoing edges
TICKET_STATE_MACHINE: StateMachine[TicketStatus] = StateMachine(
    name='Ticket',
    transitions={
        TicketStatus.PENDING_PAYMENT: frozenset(
            {TicketStatus.PAID, TicketStatus.MINTING, TicketStatus.MINTED}
        ),
        TicketStatus.PAID: frozenset({TicketStatus.MINTING, TicketStatus.MINTED}),
        # Back to PENDING_PAYMENT only when a server-side mint claim is released
        TicketStatus.MINTING: frozenset({TicketStatus.MINTED, TicketStatus.PENDING_PAYMENT}),
        TicketStatus.MINTED: frozenset(),
    },
)

CHECK_IN_STATE_MACHINE: StateMachine[CheckInStatus] = StateMachine(
    name='Ticket check-in',
    transitions={
        CheckInStatus.NOT_CHECKED_IN: frozenset({CheckInStatus.CHECKED_IN}),
        CheckInStatus.CHECKED_IN: frozenset(),
    },
)
