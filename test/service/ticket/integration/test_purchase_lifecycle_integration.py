"""
Purchase to check-in against the real schema, collaborators mocked

initiate -> prepare metadata -> confirm payment (mint) -> QR code -> check-in
-> settlement, with the ledger and availability checked along the way.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from nft_ticketing.platform.exception.exceptions import (
    AlreadyExistsError,
    InternalError,
    ServiceUnavailableError,
)
from nft_ticketing.service.ticket.app.command.check_in_use_case import CheckInUseCase
from nft_ticketing.service.ticket.app.command.confirm_payment_and_request_mint_use_case import (
    ConfirmPaymentAndRequestMintUseCase,
)
from nft_ticketing.service.ticket.app.command.generate_qr_code_use_case import (
    GenerateQrCodeUseCase,
)
from nft_ticketing.service.ticket.app.command.initiate_purchase_use_case import (
    InitiatePurchaseUseCase,
)
from nft_ticketing.service.ticket.app.command.prepare_metadata_use_case import (
    PrepareMetadataUseCase,
)
from nft_ticketing.service.ticket.app.command.process_event_settlement_use_case import (
    ProcessEventSettlementUseCase,
)
from nft_ticketing.service.ticket.app.dto.blockchain_dto import (
    MintedToken,
    MintResult,
    ParsedMintLogs,
    TokenOwnership,
)
from nft_ticketing.service.ticket.app.query.get_settlement_use_case import GetSettlementUseCase
from nft_ticketing.service.ticket.app.service.credential_issuer import CredentialIssuer
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.app.service.nft_metadata_builder import NftMetadataBuilder
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from nft_ticketing.service.ticket.domain.enum.ticket_status import CheckInStatus, TicketStatus
from nft_ticketing.service.ticket.driven_adapter.qr.segno_qr_code_renderer import (
    SegnoQrCodeRenderer,
)
from test.service.ticket.integration.conftest import UowFactory
from test.service.ticket.unit.helpers import BUYER, EVENT_ID, TX_HASH


@pytest.fixture
def mock_ipfs_client() -> Mock:
    client = AsyncMock()
    # pin names end with the batch index
    client.pin_json = AsyncMock(side_effect=lambda content, name: f'bafy{name.rsplit("_", 1)[1]}')
    return client


@pytest.mark.integration
class TestPurchaseLifecycleIntegration:
    @pytest.mark.asyncio
    async def test_purchase_mint_check_in_and_settle(
        self,
        uow_factory: UowFactory,
        published_ticket_type: TicketType,
        mock_blockchain_client: Mock,
        mock_event_client: Mock,
        mock_ipfs_client: Mock,
        credential_issuer: CredentialIssuer,
        inventory_ledger: InventoryLedger,
    ) -> None:
        # Reserve two tickets
        initiated = await InitiatePurchaseUseCase(
            uow=uow_factory(),
            blockchain_client=mock_blockchain_client,
            inventory_ledger=inventory_ledger,
        ).execute(ticket_type_id=published_ticket_type.id, buyer_address=BUYER, quantity=2)

        # Pin one metadata document per ticket
        prepared = await PrepareMetadataUseCase(
            uow=uow_factory(),
            event_client=mock_event_client,
            ipfs_client=mock_ipfs_client,
            metadata_builder=NftMetadataBuilder(),
        ).execute(purchase_id=initiated.purchase_id, quantity=2)
        assert prepared.metadata_uris == ['ipfs://bafy0', 'ipfs://bafy1']

        # Chain logs come back out of batch order; URIs pair them up
        mock_blockchain_client.parse_transaction_logs = AsyncMock(
            return_value=ParsedMintLogs(
                minted_tokens=[
                    MintedToken(token_id='501', token_uri='ipfs://bafy1'),
                    MintedToken(token_id='500', token_uri='ipfs://bafy0'),
                ],
                event_id='42',
            )
        )
        confirm = ConfirmPaymentAndRequestMintUseCase(
            uow=uow_factory(),
            blockchain_client=mock_blockchain_client,
            event_client=mock_event_client,
            credential_issuer=credential_issuer,
            inventory_ledger=inventory_ledger,
            platform_fee_percent=10,
        )
        confirmed = await confirm.execute(
            purchase_id=initiated.purchase_id, transaction_hash=TX_HASH
        )

        assert confirmed.purchase.status == PurchaseStatus.CONFIRMED
        assert [(t.batch_index, t.token_id) for t in confirmed.tickets] == [(0, '500'), (1, '501')]

        # Replay of the same hash returns the stored outcome
        replay = await confirm.execute(purchase_id=initiated.purchase_id, transaction_hash=TX_HASH)
        assert [t.token_id for t in replay.tickets] == ['500', '501']
        assert all(t.status == TicketStatus.MINTED for t in replay.tickets)

        async with uow_factory() as uow:
            stored_type = await uow.ticket_type_repo.get_by_id(
                ticket_type_id=published_ticket_type.id
            )
        assert stored_type is not None and stored_type.available_quantity == 3

        # QR code for the first ticket, then scan it at the gate
        qr = await GenerateQrCodeUseCase(
            uow=uow_factory(),
            event_client=mock_event_client,
            credential_issuer=credential_issuer,
            qr_code_renderer=SegnoQrCodeRenderer(scale=2, border=1),
        ).execute(ticket_id=confirmed.tickets[0].id)
        assert qr.qr_code_image_base64.startswith('data:image/png;base64,')
        assert not qr.reissued

        mock_blockchain_client.verify_token_ownership = AsyncMock(
            return_value=TokenOwnership(is_valid_owner=True, actual_owner=BUYER)
        )
        check_in = CheckInUseCase(
            uow=uow_factory(),
            blockchain_client=mock_blockchain_client,
            credential_issuer=credential_issuer,
        )
        admitted = await check_in.execute(qr_code_data=qr.qr_code_data, location='Gate A')
        assert admitted.ticket.check_in_status == CheckInStatus.CHECKED_IN

        with pytest.raises(AlreadyExistsError):
            await check_in.execute(qr_code_data=qr.qr_code_data, location='Gate B')

        # Ledger: one RECEIVED payment, then settled to the organizer
        summary = await GetSettlementUseCase(uow=uow_factory()).get_summary(event_id=EVENT_ID)
        assert summary.received.count == 1
        assert summary.received.platform_fee_wei == '200'
        assert summary.received.organizer_amount_wei == '1800'

        settled = await ProcessEventSettlementUseCase(uow=uow_factory()).execute(
            event_id=EVENT_ID
        )
        assert settled.settled_count == 1
        assert settled.organizer_amount_wei == '1800'

        after = await GetSettlementUseCase(uow=uow_factory()).get_summary(event_id=EVENT_ID)
        assert after.received.count == 0
        assert after.settled.count == 1

    @pytest.mark.asyncio
    async def test_server_side_mint_retry_reuses_recorded_token(
        self,
        uow_factory: UowFactory,
        published_ticket_type: TicketType,
        mock_blockchain_client: Mock,
        mock_event_client: Mock,
        mock_ipfs_client: Mock,
        credential_issuer: CredentialIssuer,
        inventory_ledger: InventoryLedger,
    ) -> None:
        initiated = await InitiatePurchaseUseCase(
            uow=uow_factory(),
            blockchain_client=mock_blockchain_client,
            inventory_ledger=inventory_ledger,
        ).execute(ticket_type_id=published_ticket_type.id, buyer_address=BUYER, quantity=2)
        await PrepareMetadataUseCase(
            uow=uow_factory(),
            event_client=mock_event_client,
            ipfs_client=mock_ipfs_client,
            metadata_builder=NftMetadataBuilder(),
        ).execute(purchase_id=initiated.purchase_id, quantity=2)

        # No mint events in the payment: the service mints, the second request fails
        mock_blockchain_client.parse_transaction_logs = AsyncMock(return_value=ParsedMintLogs())
        mock_blockchain_client.mint_ticket = AsyncMock(
            side_effect=[
                MintResult(token_id='600', transaction_hash='0xmint0'),
                ServiceUnavailableError('blockchain-service unavailable'),
            ]
        )
        confirm = ConfirmPaymentAndRequestMintUseCase(
            uow=uow_factory(),
            blockchain_client=mock_blockchain_client,
            event_client=mock_event_client,
            credential_issuer=credential_issuer,
            inventory_ledger=inventory_ledger,
        )
        with pytest.raises(InternalError, match='already minted token ids: 600'):
            await confirm.execute(purchase_id=initiated.purchase_id, transaction_hash=TX_HASH)

        async with uow_factory() as uow:
            tickets = await uow.ticket_repo.list_by_purchase(purchase_id=initiated.purchase_id)
        assert [(t.status, t.token_id) for t in tickets] == [
            (TicketStatus.MINTING, '600'),
            (TicketStatus.PENDING_PAYMENT, ''),
        ]

        # Retry mints only the ticket without a token
        mock_blockchain_client.mint_ticket = AsyncMock(
            return_value=MintResult(token_id='601', transaction_hash='0xmint1')
        )
        confirmed = await confirm.execute(
            purchase_id=initiated.purchase_id, transaction_hash=TX_HASH
        )

        assert confirmed.purchase.status == PurchaseStatus.CONFIRMED
        assert [t.token_id for t in confirmed.tickets] == ['600', '601']
        mock_blockchain_client.mint_ticket.assert_awaited_once()
        assert mock_blockchain_client.mint_ticket.await_args.kwargs['token_uri_cid'] == (
            'ipfs://bafy1'
        )
