from datetime import datetime, timedelta, timezone
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.core_setting import settings
from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import (
    CustomBaseError,
    FailedPreconditionError,
    InternalError,
    NotFoundError,
)
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.platform.metrics.ticketing_metrics import metrics
from nft_ticketing.service.ticket.app.dto.blockchain_dto import MintedToken
from nft_ticketing.service.ticket.app.dto.event_dto import EventInfo
from nft_ticketing.service.ticket.app.dto.purchase_dto import ConfirmPurchaseResult
from nft_ticketing.service.ticket.app.interface.i_blockchain_service_client import (
    IBlockchainServiceClient,
)
from nft_ticketing.service.ticket.app.interface.i_event_service_client import IEventServiceClient
from nft_ticketing.service.ticket.app.service.credential_issuer import CredentialIssuer
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.app.service.mint_correlator import correlate_tokens
from nft_ticketing.service.ticket.domain.entity.platform_transaction_entity import (
    PlatformTransaction,
)
from nft_ticketing.service.ticket.domain.entity.purchase_entity import Purchase
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType
from nft_ticketing.service.ticket.domain.entity.transaction_log_entity import TransactionLog
from nft_ticketing.service.ticket.domain.enum.purchase_status import PurchaseStatus
from nft_ticketing.service.ticket.domain.enum.ticket_status import TicketStatus
from nft_ticketing.service.ticket.domain.value_object.chain_format import validate_transaction_hash
from nft_ticketing.service.ticket.domain.value_object.fee_split import FeeSplit


class ConfirmPaymentAndRequestMintUseCase:
    """
    Verify the buyer's payment on-chain and turn the reserved tickets into NFTs.

    Flow:
    1. Validate the hash and load purchase + tickets (same hash on a CONFIRMED
       purchase returns the minted tickets with no side effects)
    2. VerifyTransaction: confirmed, successful, sent by the purchase wallet
    3. ParseTransactionLogs; when the payment carried no mint events, request
       one MintTicket per ticket in batch order. Each ticket is claimed
       (MINTING) and its token recorded in separate commits, so a retry reuses
       recorded tokens instead of minting again
    4. Correlate tokens to tickets by token URI, else by batch index
    5. One transaction: conditional CONFIRM, tickets -> MINTED with signed
       credentials, availability recount, transaction log + platform transaction

    Never reports partial success: step 5 commits everything or nothing.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        blockchain_client: IBlockchainServiceClient,
        event_client: IEventServiceClient,
        credential_issuer: CredentialIssuer,
        inventory_ledger: InventoryLedger,
        platform_fee_percent: int = settings.PLATFORM_FEE_PERCENT,
        validity_fallback_days: int = settings.TICKET_VALIDITY_FALLBACK_DAYS,
    ) -> None:
        self.uow = uow
        self.blockchain_client = blockchain_client
        self.event_client = event_client
        self.credential_issuer = credential_issuer
        self.inventory_ledger = inventory_ledger
        self.platform_fee_percent = platform_fee_percent
        self.validity_fallback_days = validity_fallback_days
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        blockchain_client: IBlockchainServiceClient = Depends(
            Provide[Container.blockchain_service_client]
        ),
        event_client: IEventServiceClient = Depends(Provide[Container.event_service_client]),
        credential_issuer: CredentialIssuer = Depends(Provide[Container.credential_issuer]),
        inventory_ledger: InventoryLedger = Depends(Provide[Container.inventory_ledger]),
    ) -> Self:
        return cls(
            uow=uow,
            blockchain_client=blockchain_client,
            event_client=event_client,
            credential_issuer=credential_issuer,
            inventory_ledger=inventory_ledger,
        )

    @Logger.io
    async def execute(self, *, purchase_id: str, transaction_hash: str) -> ConfirmPurchaseResult:
        tx_hash = validate_transaction_hash(transaction_hash)
        with self.tracer.start_as_current_span(
            'use_case.confirm_payment_and_request_mint',
            attributes={'purchase.id': purchase_id, 'transaction.hash': tx_hash},
        ):
            try:
                result = await self._confirm(purchase_id=purchase_id, tx_hash=tx_hash)
            except CustomBaseError:
                metrics.record_confirmation(result='rejected')
                raise
            return result

    async def _confirm(self, *, purchase_id: str, tx_hash: str) -> ConfirmPurchaseResult:
        now = datetime.now(timezone.utc)

        async with self.uow:
            purchase = await self.uow.purchase_repo.get_by_id(purchase_id=purchase_id)
            if not purchase:
                raise NotFoundError(f'Purchase {purchase_id} not found')
            if purchase.status == PurchaseStatus.CONFIRMED:
                return await self._already_confirmed(purchase=purchase, tx_hash=tx_hash)

            purchase.ensure_active(now)
            if not purchase.metadata_ready:
                raise FailedPreconditionError(
                    f'Metadata not prepared for purchase {purchase_id}; call PrepareMetadata first'
                )

            tickets = await self.uow.ticket_repo.list_by_purchase(purchase_id=purchase_id)
            if not tickets:
                raise NotFoundError(f'No tickets found for purchase {purchase_id}')
            if len(purchase.metadata_uris) < len(tickets):
                raise FailedPreconditionError(
                    f'Purchase {purchase_id} has {len(purchase.metadata_uris)} metadata URIs '
                    f'for {len(tickets)} tickets'
                )

            other = await self.uow.purchase_repo.get_by_transaction_hash(transaction_hash=tx_hash)
            if other and other.id != purchase.id:
                raise FailedPreconditionError(
                    f'Transaction {tx_hash} already confirmed purchase {other.id}'
                )
            ticket_type = await self.uow.ticket_type_repo.get_by_id(
                ticket_type_id=purchase.ticket_type_id
            )
        if not ticket_type:
            raise NotFoundError(f'Ticket type {purchase.ticket_type_id} not found')

        verification = await self.blockchain_client.verify_transaction(transaction_hash=tx_hash)
        if not (verification.is_confirmed and verification.success_on_chain):
            raise FailedPreconditionError(
                f'Transaction {tx_hash} is not confirmed or failed on-chain'
            )
        if verification.from_address and verification.from_address != purchase.wallet_address:
            raise FailedPreconditionError(
                f'Transaction sender {verification.from_address} does not match '
                f'purchase wallet {purchase.wallet_address}'
            )
        if verification.value_wei is not None and int(verification.value_wei) < purchase.total_price_wei:
            raise FailedPreconditionError(
                f'Transaction value {verification.value_wei} wei is below the '
                f'{purchase.total_price_wei} wei due'
            )

        logs = await self.blockchain_client.parse_transaction_logs(transaction_hash=tx_hash)
        expected_event_id = purchase.purchase_details.get('blockchain_event_id')
        if logs.event_id and expected_event_id and logs.event_id != str(expected_event_id):
            raise FailedPreconditionError(
                f'Transaction minted for blockchain event {logs.event_id}, '
                f'expected {expected_event_id}'
            )

        minted_tokens = logs.minted_tokens or await self._mint_server_side(
            purchase=purchase, tickets=tickets, now=now
        )
        pairs = correlate_tokens(
            tickets=tickets, metadata_uris=purchase.metadata_uris, minted_tokens=minted_tokens
        )

        event = await self._fetch_event(event_id=purchase.event_id)
        expiry_time = self._ticket_expiry(event=event, ticket_type=ticket_type, now=now)

        try:
            async with self.uow:
                if not await self.uow.purchase_repo.confirm_if_initiated(
                    purchase_id=purchase_id, transaction_hash=tx_hash, now=now
                ):
                    current = await self.uow.purchase_repo.get_by_id(purchase_id=purchase_id)
                    if current and current.status == PurchaseStatus.CONFIRMED:
                        return await self._already_confirmed(purchase=current, tx_hash=tx_hash)
                    raise FailedPreconditionError(
                        f'Purchase {purchase_id} changed state during confirmation'
                    )

                minted_tickets: List[Ticket] = []
                for ticket, token, uri in pairs:
                    credential = self.credential_issuer.issue(ticket=ticket, now=now)
                    minted = ticket.mint(
                        token_id=token.token_id,
                        token_uri_cid=uri,
                        transaction_hash=tx_hash,
                        qr_code_secret=credential.to_json(),
                        expiry_time=expiry_time,
                        now=now,
                    )
                    if not await self.uow.ticket_repo.mark_minted(ticket=minted):
                        raise FailedPreconditionError(f'Ticket {ticket.id} was already minted')
                    minted_tickets.append(minted)

                await self.inventory_ledger.recompute(uow=self.uow, ticket_type=ticket_type, now=now)

                split = FeeSplit.compute(
                    amount_wei=purchase.total_price_wei, fee_percent=self.platform_fee_percent
                )
                organizer_id = event.organizer_id if event else ''
                await self.uow.ledger_repo.add_transaction_log(
                    log=TransactionLog.for_purchase(
                        transaction_hash=tx_hash,
                        purchase_id=purchase.id,
                        event_id=purchase.event_id,
                        organizer_id=organizer_id,
                        ticket_type_id=purchase.ticket_type_id,
                        buyer_address=purchase.wallet_address,
                        to_address=verification.to_address
                        or purchase.purchase_details.get('payment_contract_address', ''),
                        block_number=verification.block_number,
                        ticket_ids=[ticket.id for ticket in minted_tickets],
                        split=split,
                        metadata={
                            'quantity': purchase.quantity,
                            'ticket_count': len(minted_tickets),
                            'blockchain_event_id': purchase.purchase_details.get(
                                'blockchain_event_id'
                            ),
                            'blockchain_ticket_type_id': purchase.purchase_details.get(
                                'blockchain_ticket_type_id'
                            ),
                            'token_ids': [ticket.token_id for ticket in minted_tickets],
                        },
                        now=now,
                    )
                )
                await self.uow.ledger_repo.add_platform_transaction(
                    platform_transaction=PlatformTransaction.received(
                        transaction_hash=tx_hash,
                        purchase_id=purchase.id,
                        event_id=purchase.event_id,
                        event_organizer_id=organizer_id,
                        buyer_address=purchase.wallet_address,
                        split=split,
                        now=now,
                    )
                )
                await self.uow.commit()
        except FailedPreconditionError:
            raise
        except Exception as e:
            raise InternalError(
                f'Failed to finalize purchase {purchase_id}: {e}; no tickets updated'
            ) from e

        metrics.record_confirmation(result='confirmed')
        metrics.record_minted(event_id=purchase.event_id, count=len(minted_tickets))
        Logger.base.info(
            f'✅ [CONFIRM] Purchase {purchase_id} confirmed by {tx_hash}, '
            f'{len(minted_tickets)} tickets minted'
        )
        confirmed = purchase.confirm(transaction_hash=tx_hash, now=now)
        return ConfirmPurchaseResult(purchase=confirmed, tickets=minted_tickets)

    async def _already_confirmed(self, *, purchase: Purchase, tx_hash: str) -> ConfirmPurchaseResult:
        if purchase.transaction_hash != tx_hash:
            raise FailedPreconditionError(
                f'Purchase {purchase.id} was already confirmed with a different transaction'
            )
        tickets = await self.uow.ticket_repo.list_by_purchase(purchase_id=purchase.id)
        metrics.record_confirmation(result='idempotent')
        return ConfirmPurchaseResult(purchase=purchase, tickets=tickets)

    async def _mint_server_side(
        self, *, purchase: Purchase, tickets: List[Ticket], now: datetime
    ) -> List[MintedToken]:
        details = purchase.purchase_details
        minted: List[MintedToken] = []
        requested = 0
        for ticket in sorted(tickets, key=lambda t: t.batch_index):
            uri = purchase.metadata_uris[ticket.batch_index]
            if ticket.has_recorded_token:
                minted.append(
                    MintedToken(token_id=ticket.token_id, token_uri=ticket.token_uri_cid or uri)
                )
                continue

            claimed = await self._claim_for_mint(ticket=ticket, now=now)
            try:
                result = await self.blockchain_client.mint_ticket(
                    buyer_address=purchase.wallet_address,
                    token_uri_cid=uri,
                    blockchain_ticket_type_id=str(details.get('blockchain_ticket_type_id', '')),
                    session_id_for_contract=str(details.get('session_id_for_contract', '')),
                )
            except CustomBaseError as e:
                await self._release_mint_claim(ticket=claimed, now=now)
                if not minted:
                    raise
                token_ids = ', '.join(token.token_id for token in minted)
                raise InternalError(
                    f'Minting stopped after {len(minted)} of {len(tickets)} tickets for purchase '
                    f'{purchase.id} ({e.message}); already minted token ids: {token_ids}. '
                    'A retry mints only the remaining tickets'
                ) from e
            await self._record_mint_token(
                ticket=claimed.record_mint_token(
                    token_id=result.token_id, token_uri_cid=uri, now=now
                )
            )
            requested += 1
            minted.append(MintedToken(token_id=result.token_id, token_uri=uri))
        Logger.base.info(
            f'🪙 [MINT] Requested {requested} mints for purchase {purchase.id}, '
            f'{len(minted) - requested} reused from an earlier attempt'
        )
        return minted

    async def _claim_for_mint(self, *, ticket: Ticket, now: datetime) -> Ticket:
        if ticket.status == TicketStatus.MINTING:
            raise FailedPreconditionError(
                f'Ticket {ticket.id} has a mint in progress with no recorded token; '
                'manual reconciliation required'
            )
        claimed = ticket.claim_mint(now=now)
        async with self.uow:
            if not await self.uow.ticket_repo.claim_for_mint(ticket=claimed):
                raise FailedPreconditionError(
                    f'Ticket {ticket.id} was claimed by another confirmation'
                )
            await self.uow.commit()
        return claimed

    async def _record_mint_token(self, *, ticket: Ticket) -> None:
        try:
            async with self.uow:
                recorded = await self.uow.ticket_repo.record_mint_token(ticket=ticket)
                if recorded:
                    await self.uow.commit()
        except Exception as e:
            raise InternalError(
                f'Token {ticket.token_id} minted for ticket {ticket.id} but not recorded: {e}; '
                'manual reconciliation required'
            ) from e
        if not recorded:
            raise InternalError(
                f'Token {ticket.token_id} minted for ticket {ticket.id} but the ticket left '
                'MINTING; manual reconciliation required'
            )

    async def _release_mint_claim(self, *, ticket: Ticket, now: datetime) -> None:
        async with self.uow:
            await self.uow.ticket_repo.release_mint_claim(
                ticket=ticket.release_mint_claim(now=now)
            )
            await self.uow.commit()

    async def _fetch_event(self, *, event_id: str) -> Optional[EventInfo]:
        try:
            return await self.event_client.get_event(event_id=event_id)
        except CustomBaseError as e:
            Logger.base.warning(
                f'⚠️ [CONFIRM] Event {event_id} unavailable ({e.message}); '
                'using fallback ticket validity'
            )
            return None

    def _ticket_expiry(
        self, *, event: Optional[EventInfo], ticket_type: TicketType, now: datetime
    ) -> datetime:
        session = event.find_session(ticket_type.session_id) if event else None
        if session and session.end_time > 0:
            return session.end_datetime
        return now + timedelta(days=self.validity_fallback_days)
