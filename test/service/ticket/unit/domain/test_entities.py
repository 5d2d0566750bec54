"""
Unit tests for TicketType, Purchase and Ticket behavior
"""

from datetime import timedelta

import pytest

from nft_ticketing.platform.exception.exceptions import (
    AlreadyExistsError,
    FailedPreconditionError,
    InvalidArgumentError,
)
from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from nft_ticketing.service.ticket.domain.enum.ticket_status import CheckInStatus, TicketStatus
from test.service.ticket.unit.helpers import (
    BUYER,
    TX_HASH,
    make_minted_ticket,
    make_purchase,
    make_ticket,
    make_ticket_type,
    utc_now,
)


@pytest.mark.unit
class TestTicketType:
    def test_create_starts_as_unpublished_draft(self) -> None:
        ticket_type = TicketType.create(
            event_id='event-1',
            session_id='session-1',
            contract_session_id='7',
            name='  General  ',
            total_quantity=100,
            price_wei='5000',
        )

        assert ticket_type.name == 'General'
        assert ticket_type.available_quantity == 100
        assert not ticket_type.is_published

    @pytest.mark.parametrize(
        'overrides, error',
        [
            ({'name': ' '}, 'name is required'),
            ({'total_quantity': 0}, 'at least 1'),
            ({'price_wei': '-5'}, 'must not be negative'),
        ],
    )
    def test_create_validation(self, overrides: dict, error: str) -> None:
        params = {
            'event_id': 'event-1',
            'session_id': 'session-1',
            'contract_session_id': '7',
            'name': 'General',
            'total_quantity': 10,
            'price_wei': '5000',
        } | overrides

        with pytest.raises(InvalidArgumentError, match=error):
            TicketType.create(**params)

    def test_availability_never_goes_negative(self) -> None:
        ticket_type = make_ticket_type(total_quantity=5)

        assert ticket_type.compute_availability(minted_count=2, active_reservation_count=1) == 2
        assert ticket_type.compute_availability(minted_count=4, active_reservation_count=3) == 0

    def test_publish_sets_blockchain_ids_once(self) -> None:
        draft = make_ticket_type(blockchain_ticket_type_id='')

        published = draft.publish(blockchain_event_id='42', blockchain_ticket_type_id='9')

        assert published.is_published
        with pytest.raises(AlreadyExistsError):
            published.publish(blockchain_event_id='42', blockchain_ticket_type_id='10')

    def test_published_type_freezes_price(self) -> None:
        with pytest.raises(FailedPreconditionError, match='only allow description'):
            make_ticket_type().update(price_wei='1')

    def test_published_type_accepts_description(self) -> None:
        updated = make_ticket_type().update(description='Balcony')

        assert updated.description == 'Balcony'

    def test_quantity_cannot_drop_below_committed(self) -> None:
        draft = make_ticket_type(blockchain_ticket_type_id='')

        with pytest.raises(FailedPreconditionError, match='below the 3 tickets'):
            draft.update(total_quantity=2, committed_count=3)

    def test_update_requires_a_field(self) -> None:
        with pytest.raises(InvalidArgumentError, match='No update fields'):
            make_ticket_type().update()


@pytest.mark.unit
class TestPurchase:
    def test_initiate_sets_expiry_window(self) -> None:
        now = utc_now()

        purchase = Purchase.initiate(
            ticket_type_id='tt-1',
            event_id='event-1',
            wallet_address=BUYER,
            quantity=2,
            selected_seats=[],
            purchase_details={'total_price_wei': '2000'},
            now=now,
            expiry_minutes=15,
        )

        assert purchase.status == PurchaseStatus.INITIATED
        assert purchase.expires_at == now + timedelta(minutes=15)
        assert purchase.total_price_wei == 2000

    def test_confirm_requires_metadata(self) -> None:
        purchase = make_purchase(metadata_uris=['ipfs://a'])

        with pytest.raises(FailedPreconditionError, match='metadata not prepared'):
            purchase.confirm(transaction_hash=TX_HASH, now=utc_now())

    def test_confirm(self) -> None:
        purchase = make_purchase(metadata_uris=['ipfs://a', 'ipfs://b'])

        confirmed = purchase.confirm(transaction_hash=TX_HASH, now=utc_now())

        assert confirmed.status == PurchaseStatus.CONFIRMED
        assert confirmed.transaction_hash == TX_HASH

    def test_expired_purchase_is_not_active(self) -> None:
        purchase = make_purchase(expires_at=utc_now() - timedelta(seconds=1))

        with pytest.raises(FailedPreconditionError, match='reservation expired'):
            purchase.ensure_active(utc_now())

    def test_failed_purchase_cannot_be_confirmed(self) -> None:
        failed = make_purchase().fail(reason='card declined', now=utc_now())

        assert failed.failure_reason == 'card declined'
        with pytest.raises(FailedPreconditionError, match='Purchase is FAILED'):
            failed.confirm(transaction_hash=TX_HASH, now=utc_now())


@pytest.mark.unit
class TestTicket:
    def test_reservation_is_active_until_expiry(self) -> None:
        now = utc_now()
        ticket = make_ticket(expiry_time=now + timedelta(minutes=1))

        assert ticket.is_active_reservation(now)
        assert not ticket.is_active_reservation(now + timedelta(minutes=2))

    def test_mint_fills_token_fields(self) -> None:
        now = utc_now()

        minted = make_ticket().mint(
            token_id='101',
            token_uri_cid='ipfs://cid',
            transaction_hash=TX_HASH,
            qr_code_secret='{}',
            expiry_time=now + timedelta(days=1),
            now=now,
        )

        assert minted.status == TicketStatus.MINTED
        assert minted.token_id == '101'
        assert minted.qr_code_secret == '{}'

    def test_minted_ticket_cannot_mint_again(self) -> None:
        with pytest.raises(FailedPreconditionError):
            make_minted_ticket().mint(
                token_id='1',
                token_uri_cid='x',
                transaction_hash=TX_HASH,
                qr_code_secret='',
                expiry_time=utc_now(),
                now=utc_now(),
            )

    def test_mint_claim_records_token_then_mints(self) -> None:
        now = utc_now()

        claimed = make_ticket().claim_mint(now=now)
        recorded = claimed.record_mint_token(token_id='200', token_uri_cid='ipfs://cid-0', now=now)

        assert claimed.status == TicketStatus.MINTING
        assert recorded.has_recorded_token
        assert recorded.status == TicketStatus.MINTING
        minted = recorded.mint(
            token_id='200',
            token_uri_cid='ipfs://cid-0',
            transaction_hash=TX_HASH,
            qr_code_secret='{}',
            expiry_time=now + timedelta(days=1),
            now=now,
        )
        assert minted.status == TicketStatus.MINTED

    def test_claim_with_recorded_token_is_rejected(self) -> None:
        recorded = (
            make_ticket()
            .claim_mint(now=utc_now())
            .record_mint_token(token_id='200', token_uri_cid='ipfs://cid-0', now=utc_now())
        )

        with pytest.raises(FailedPreconditionError, match='already carries token 200'):
            recorded.claim_mint(now=utc_now())
        with pytest.raises(FailedPreconditionError, match='claim is kept'):
            recorded.release_mint_claim(now=utc_now())

    def test_released_claim_returns_to_pending_payment(self) -> None:
        released = make_ticket().claim_mint(now=utc_now()).release_mint_claim(now=utc_now())

        assert released.status == TicketStatus.PENDING_PAYMENT
        assert not released.has_recorded_token

    def test_token_only_recorded_on_minting_ticket(self) -> None:
        with pytest.raises(FailedPreconditionError, match='only a MINTING ticket'):
            make_ticket().record_mint_token(token_id='1', token_uri_cid='x', now=utc_now())

    def test_check_in_records_scanner(self) -> None:
        now = utc_now()

        ticket = make_minted_ticket().check_in(location='Gate A', scanner_id='scanner-1', now=now)

        assert ticket.check_in_status == CheckInStatus.CHECKED_IN
        assert ticket.check_in_location == 'Gate A'
        assert ticket.check_in_time == now

    def test_second_check_in_is_already_exists(self) -> None:
        ticket = make_minted_ticket().check_in(location='', scanner_id='', now=utc_now())

        with pytest.raises(AlreadyExistsError, match='already checked in'):
            ticket.check_in(location='', scanner_id='', now=utc_now())

    def test_unminted_ticket_cannot_check_in(self) -> None:
        with pytest.raises(FailedPreconditionError, match='only MINTED'):
            make_ticket().ensure_checkable()
