from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from unittest.mock import AsyncMock, Mock

import attrs

from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.service.ticket.app.dto.event_dto import EventInfo, EventSession
from nft_ticketing.service.ticket.app.interface.i_ledger_repo import ILedgerRepo
from nft_ticketing.service.ticket.app.interface.i_purchase_repo import IPurchaseRepo
from nft_ticketing.service.ticket.app.interface.i_ticket_repo import ITicketRepo
from nft_ticketing.service.ticket.app.interface.i_ticket_type_repo import ITicketTypeRepo
from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType
from nft_ticketing.service.ticket.domain.enum.ticket_status import TicketStatus


# Well-known throwaway key; its address is fixed, so tests can assert on it
TEST_SIGNING_KEY = '4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318'
TEST_SIGNER_ADDRESS = '0x2c7536e3605d9c16a7a3d7b1898e529396a65c23'

BUYER = '0x' + 'ab' * 20
OTHER_WALLET = '0x' + 'cd' * 20
PAYMENT_CONTRACT = '0x' + 'ef' * 20
TX_HASH = '0x' + '1' * 64
OTHER_TX_HASH = '0x' + '2' * 64

EVENT_ID = 'event-1'
SESSION_ID = 'session-1'
TICKET_TYPE_ID = 'tt-1'
PURCHASE_ID = 'purchase-1'

# 2030-01-01T00:00:00Z
SESSION_END = 1893456000


class FakeUnitOfWork(AbstractUnitOfWork):
    """UnitOfWork with spec'd AsyncMock repositories; records commits and rollbacks"""

    def __init__(self) -> None:
        self.ticket_type_repo: Mock = AsyncMock(spec=ITicketTypeRepo)
        self.purchase_repo: Mock = AsyncMock(spec=IPurchaseRepo)
        self.ticket_repo: Mock = AsyncMock(spec=ITicketRepo)
        self.ledger_repo: Mock = AsyncMock(spec=ILedgerRepo)
        self.ticket_repo.count_for_availability.return_value = (0, 0)
        self.commit_count = 0
        self.rollback_count = 0

    @property
    def committed(self) -> bool:
        return self.commit_count > 0

    async def _commit(self) -> None:
        self.commit_count += 1

    async def rollback(self) -> None:
        self.rollback_count += 1


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def make_ticket_type(**overrides: Any) -> TicketType:
    now = utc_now()
    ticket_type = TicketType(
        id=TICKET_TYPE_ID,
        event_id=EVENT_ID,
        session_id=SESSION_ID,
        contract_session_id='7',
        name='VIP',
        description='Front rows',
        total_quantity=5,
        available_quantity=5,
        price_wei='1000',
        blockchain_event_id='42',
        blockchain_ticket_type_id='3',
        created_at=now,
        updated_at=now,
    )
    return attrs.evolve(ticket_type, **overrides)


def make_purchase(**overrides: Any) -> Purchase:
    now = utc_now()
    purchase = Purchase(
        id=PURCHASE_ID,
        ticket_type_id=TICKET_TYPE_ID,
        event_id=EVENT_ID,
        quantity=2,
        wallet_address=BUYER,
        expires_at=now + timedelta(minutes=15),
        purchase_details={
            'payment_contract_address': PAYMENT_CONTRACT,
            'price_per_ticket_wei': '1000',
            'total_price_wei': '2000',
            'blockchain_event_id': '42',
            'blockchain_ticket_type_id': '3',
            'session_id_for_contract': '7',
        },
        created_at=now,
        updated_at=now,
    )
    return attrs.evolve(purchase, **overrides)


def make_ticket(batch_index: int = 0, **overrides: Any) -> Ticket:
    now = utc_now()
    ticket = Ticket(
        id=f'ticket-{batch_index}',
        purchase_id=PURCHASE_ID,
        batch_index=batch_index,
        event_id=EVENT_ID,
        ticket_type_id=TICKET_TYPE_ID,
        session_id=SESSION_ID,
        owner_address=BUYER,
        status=TicketStatus.PENDING_PAYMENT,
        expiry_time=now + timedelta(minutes=15),
        created_at=now,
        updated_at=now,
    )
    return attrs.evolve(ticket, **overrides)


def make_minted_ticket(batch_index: int = 0, *, qr_code_secret: str = '', **overrides: Any) -> Ticket:
    fields: dict[str, Any] = {
        'status': TicketStatus.MINTED,
        'token_id': str(100 + batch_index),
        'token_uri_cid': f'ipfs://cid-{batch_index}',
        'transaction_hash': TX_HASH,
        'qr_code_secret': qr_code_secret,
        'expiry_time': datetime.fromtimestamp(SESSION_END, tz=timezone.utc),
    }
    return make_ticket(batch_index, **(fields | overrides))


def make_event(*, end_time: int = SESSION_END, organizer_id: str = 'org-1') -> EventInfo:
    return EventInfo(
        id=EVENT_ID,
        name='Summer Fest',
        organizer_id=organizer_id,
        banner_url_cid='bafybanner',
        blockchain_event_id='42',
        sessions=[
            EventSession(
                id=SESSION_ID,
                name='Night One',
                contract_session_id='7',
                start_time=end_time - 4 * 60 * 60,
                end_time=end_time,
            )
        ],
    )


def event_payload(*, contract_session_id: Optional[str] = '7') -> dict[str, Any]:
    """Event service response body"""
    return {
        'id': EVENT_ID,
        'name': 'Summer Fest',
        'organizer_id': 'org-1',
        'blockchain_event_id': '42',
        'sessions': [
            {
                'id': SESSION_ID,
                'name': 'Night One',
                'contract_session_id': contract_session_id,
                'start_time': SESSION_END - 4 * 60 * 60,
                'end_time': SESSION_END,
            }
        ],
    }
