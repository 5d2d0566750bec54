from datetime import datetime
from typing import Optional

import attrs
import uuid_utils

from nft_ticketing.platform.exception.exceptions import (
    AlreadyExistsError,
    FailedPreconditionError,
)
from nft_ticketing.service.ticket.domain.enum.ticket_status import (
    RESERVING_STATUSES,
    CheckInStatus,
    TicketStatus,
)
from nft_ticketing.service.ticket.domain.state_machine import (
    CHECK_IN_STATE_MACHINE,
    TICKET_STATE_MACHINE,
)
from nft_ticketing.service.ticket.domain.value_object.seat_info import SeatInfo


@attrs.define
class Ticket:
    id: str
    purchase_id: str
    batch_index: int
    event_id: str
    ticket_type_id: str
    owner_address: str
    session_id: str = ''
    status: TicketStatus = TicketStatus.PENDING_PAYMENT
    token_id: str = ''
    token_uri_cid: str = ''
    transaction_hash: str = ''
    qr_code_secret: str = ''
    check_in_status: CheckInStatus = CheckInStatus.NOT_CHECKED_IN
    check_in_time: Optional[datetime] = None
    check_in_location: str = ''
    check_in_scanner_id: str = ''
    expiry_time: Optional[datetime] = None
    seat_info: Optional[SeatInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def reserve(
        cls,
        *,
        purchase_id: str,
        batch_index: int,
        event_id: str,
        ticket_type_id: str,
        session_id: str,
        owner_address: str,
        expiry_time: datetime,
        seat_info: Optional[SeatInfo],
        now: datetime,
    ) -> 'Ticket':
        return cls(
            id=str(uuid_utils.uuid7()),
            purchase_id=purchase_id,
            batch_index=batch_index,
            event_id=event_id,
            ticket_type_id=ticket_type_id,
            session_id=session_id,
            owner_address=owner_address,
            status=TicketStatus.PENDING_PAYMENT,
            expiry_time=expiry_time,
            seat_info=seat_info,
            created_at=now,
            updated_at=now,
        )

    @property
    def seat_key(self) -> Optional[str]:
        return self.seat_info.seat_key if self.seat_info else None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_status == CheckInStatus.CHECKED_IN

    def is_active_reservation(self, now: datetime) -> bool:
        return (
            self.status in RESERVING_STATUSES
            and self.expiry_time is not None
            and self.expiry_time > now
        )

    @property
    def has_recorded_token(self) -> bool:
        return bool(self.token_id)

    def claim_mint(self, *, now: datetime) -> 'Ticket':
        if self.has_recorded_token:
            raise FailedPreconditionError(
                f'Ticket {self.id} already carries token {self.token_id}'
            )
        TICKET_STATE_MACHINE.ensure(self.status, TicketStatus.MINTING)
        return attrs.evolve(self, status=TicketStatus.MINTING, updated_at=now)

    def record_mint_token(self, *, token_id: str, token_uri_cid: str, now: datetime) -> 'Ticket':
        if self.status != TicketStatus.MINTING:
            raise FailedPreconditionError(
                f'Ticket {self.id} is {self.status.value}; only a MINTING ticket takes a token'
            )
        return attrs.evolve(
            self, token_id=token_id, token_uri_cid=token_uri_cid, updated_at=now
        )

    def release_mint_claim(self, *, now: datetime) -> 'Ticket':
        if self.has_recorded_token:
            raise FailedPreconditionError(
                f'Ticket {self.id} already carries token {self.token_id}; claim is kept'
            )
        TICKET_STATE_MACHINE.ensure(self.status, TicketStatus.PENDING_PAYMENT)
        return attrs.evolve(self, status=TicketStatus.PENDING_PAYMENT, updated_at=now)

    def mint(
        self,
        *,
        token_id: str,
        token_uri_cid: str,
        transaction_hash: str,
        qr_code_secret: str,
        expiry_time: datetime,
        now: datetime,
    ) -> 'Ticket':
        TICKET_STATE_MACHINE.ensure(self.status, TicketStatus.MINTED)
        return attrs.evolve(
            self,
            status=TicketStatus.MINTED,
            token_id=token_id,
            token_uri_cid=token_uri_cid,
            transaction_hash=transaction_hash,
            qr_code_secret=qr_code_secret,
            expiry_time=expiry_time,
            updated_at=now,
        )

    def ensure_checkable(self) -> None:
        if self.status != TicketStatus.MINTED:
            raise FailedPreconditionError(
                f'Ticket {self.id} is {self.status.value}; only MINTED tickets can check in'
            )
        if self.is_checked_in:
            raise AlreadyExistsError(
                f'Ticket {self.id} already checked in'
                + (f' at {self.check_in_time.isoformat()}' if self.check_in_time else '')
            )

    def check_in(self, *, location: str, scanner_id: str, now: datetime) -> 'Ticket':
        self.ensure_checkable()
        CHECK_IN_STATE_MACHINE.ensure(self.check_in_status, CheckInStatus.CHECKED_IN)
        return attrs.evolve(
            self,
            check_in_status=CheckInStatus.CHECKED_IN,
            check_in_time=now,
            check_in_location=location,
            check_in_scanner_id=scanner_id,
            updated_at=now,
        )
