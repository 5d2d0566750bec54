from datetime import datetime, timezone
from typing import Optional

import attrs
import uuid_utils

from nft_ticketing.platform.exception.exceptions import (
    AlreadyExistsError,
    FailedPreconditionError,
    InvalidArgumentError,
)
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.domain.value_object.chain_format import parse_wei


@attrs.define
class TicketType:
    id: str
    event_id: str
    session_id: str
    name: str
    total_quantity: int
    available_quantity: int
    price_wei: str
    contract_session_id: str = ''
    description: str = ''
    blockchain_event_id: str = ''
    blockchain_ticket_type_id: str = ''
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_id: str,
        session_id: str,
        contract_session_id: str,
        name: str,
        total_quantity: int,
        price_wei: str,
        description: str = '',
        blockchain_event_id: str = '',
    ) -> 'TicketType':
        name = name.strip()
        if not name:
            raise InvalidArgumentError('Ticket type name is required')
        if total_quantity < 1:
            raise InvalidArgumentError('total_quantity must be at least 1')
        price = parse_wei(price_wei)

        now = datetime.now(timezone.utc)
        return cls(
            id=str(uuid_utils.uuid7()),
            event_id=event_id,
            session_id=session_id,
            contract_session_id=contract_session_id,
            name=name,
            description=description,
            total_quantity=total_quantity,
            available_quantity=total_quantity,
            price_wei=str(price),
            blockchain_event_id=blockchain_event_id,
            blockchain_ticket_type_id='',  # Draft until published on-chain
            created_at=now,
            updated_at=now,
        )

    @property
    def is_published(self) -> bool:
        return bool(self.blockchain_ticket_type_id) and bool(self.blockchain_event_id)

    @property
    def price_wei_int(self) -> int:
        return int(self.price_wei)

    def compute_availability(self, *, minted_count: int, active_reservation_count: int) -> int:
        return max(0, self.total_quantity - minted_count - active_reservation_count)

    def publish(self, *, blockchain_event_id: str, blockchain_ticket_type_id: str) -> 'TicketType':
        if self.blockchain_ticket_type_id:
            raise AlreadyExistsError(
                f'Ticket type {self.id} is already published '
                f'(blockchain id {self.blockchain_ticket_type_id})'
            )
        if not blockchain_ticket_type_id:
            raise FailedPreconditionError('Blockchain did not return a ticket type id')
        return attrs.evolve(
            self,
            blockchain_event_id=blockchain_event_id,
            blockchain_ticket_type_id=blockchain_ticket_type_id,
            updated_at=datetime.now(timezone.utc),
        )

    def update(
        self,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        total_quantity: Optional[int] = None,
        price_wei: Optional[str] = None,
        blockchain_event_id: Optional[str] = None,
        committed_count: int = 0,
    ) -> 'TicketType':
        """
        Apply an organizer edit.

        ``committed_count`` is minted plus still-held tickets; total quantity may
        not drop below it. Name, quantity and price are frozen once the type is
        registered on-chain.
        """
        if all(
            value is None
            for value in (name, description, total_quantity, price_wei, blockchain_event_id)
        ):
            raise InvalidArgumentError('No update fields provided')

        if self.is_published and any(
            value is not None for value in (name, total_quantity, price_wei)
        ):
            raise FailedPreconditionError(
                'Published ticket types only allow description and blockchain_event_id updates'
            )

        changes: dict = {'updated_at': datetime.now(timezone.utc)}
        if name is not None:
            if not name.strip():
                raise InvalidArgumentError('Ticket type name is required')
            changes['name'] = name.strip()
        if description is not None:
            changes['description'] = description
        if price_wei is not None:
            changes['price_wei'] = str(parse_wei(price_wei))
        if blockchain_event_id is not None:
            changes['blockchain_event_id'] = blockchain_event_id
        if total_quantity is not None:
            if total_quantity < 1:
                raise InvalidArgumentError('total_quantity must be at least 1')
            if total_quantity < committed_count:
                raise FailedPreconditionError(
                    f'total_quantity {total_quantity} is below the {committed_count} '
                    'tickets already sold or held'
                )
            changes['total_quantity'] = total_quantity
        return attrs.evolve(self, **changes)
