from typing import Optional

import httpx

from nft_ticketing.platform.config.core_setting import settings
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.dto.blockchain_dto import (
    MintedToken,
    MintResult,
    ParsedMintLogs,
    PaymentDetails,
    RegisteredTicketType,
    TokenOwnership,
    TransactionVerification,
)
from nft_ticketing.service.ticket.app.interface.i_blockchain_service_client import (
    IBlockchainServiceClient,
)
from nft_ticketing.service.ticket.driven_adapter.client.base_http_client import BaseHttpClient


class BlockchainServiceClient(BaseHttpClient, IBlockchainServiceClient):
    service_name = 'blockchain-service'

    def __init__(
        self,
        *,
        base_url: str,
        read_timeout: float = settings.BLOCKCHAIN_READ_TIMEOUT,
        verify_timeout: float = settings.BLOCKCHAIN_VERIFY_TIMEOUT,
        mint_timeout: float = settings.BLOCKCHAIN_MINT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(base_url=base_url, default_timeout=read_timeout, transport=transport)
        self.read_timeout = read_timeout
        self.verify_timeout = verify_timeout
        self.mint_timeout = mint_timeout

    @Logger.io
    async def get_ticket_payment_details(
        self, *, blockchain_event_id: str, price_wei: str
    ) -> PaymentDetails:
        data = await self._request(
            'POST',
            '/payment-details',
            operation='GetTicketPaymentDetails',
            timeout=self.read_timeout,
            json={'blockchain_event_id': blockchain_event_id, 'price_wei': price_wei},
        )
        return PaymentDetails(
            payment_contract_address=data['payment_contract_address'],
            price_wei=str(data.get('price_wei', price_wei)),
        )

    @Logger.io
    async def verify_transaction(self, *, transaction_hash: str) -> TransactionVerification:
        data = await self._request(
            'GET',
            f'/transactions/{transaction_hash}/verify',
            operation='VerifyTransaction',
            timeout=self.verify_timeout,
        )
        value = data.get('value_wei')
        return TransactionVerification(
            is_confirmed=bool(data.get('is_confirmed')),
            success_on_chain=bool(data.get('success_on_chain')),
            from_address=(data.get('from_address') or '').lower(),
            to_address=(data.get('to_address') or '').lower(),
            value_wei=str(value) if value is not None else None,
            block_number=data.get('block_number'),
        )

    @Logger.io
    async def parse_transaction_logs(self, *, transaction_hash: str) -> ParsedMintLogs:
        data = await self._request(
            'GET',
            f'/transactions/{transaction_hash}/logs',
            operation='ParseTransactionLogs',
            timeout=self.verify_timeout,
        )
        return ParsedMintLogs(
            minted_tokens=[
                MintedToken(token_id=str(token['token_id']), token_uri=token.get('token_uri') or '')
                for token in data.get('minted_tokens', [])
            ],
            event_id=str(data.get('event_id') or ''),
            session_id=str(data.get('session_id') or ''),
        )

    @Logger.io
    async def mint_ticket(
        self,
        *,
        buyer_address: str,
        token_uri_cid: str,
        blockchain_ticket_type_id: str,
        session_id_for_contract: str,
    ) -> MintResult:
        data = await self._request(
            'POST',
            '/tickets/mint',
            operation='MintTicket',
            timeout=self.mint_timeout,
            json={
                'buyer_address': buyer_address,
                'token_uri_cid': token_uri_cid,
                'blockchain_ticket_type_id': blockchain_ticket_type_id,
                'session_id_for_contract': session_id_for_contract,
            },
        )
        return MintResult(
            token_id=str(data['token_id']), transaction_hash=data.get('transaction_hash', '')
        )

    @Logger.io
    async def verify_token_ownership(self, *, token_id: str, expected_owner: str) -> TokenOwnership:
        data = await self._request(
            'GET',
            f'/tokens/{token_id}/ownership',
            operation='VerifyTokenOwnership',
            timeout=self.read_timeout,
            params={'expected_owner': expected_owner},
        )
        return TokenOwnership(
            is_valid_owner=bool(data.get('is_valid_owner')),
            actual_owner=(data.get('actual_owner') or '').lower(),
        )

    @Logger.io
    async def register_ticket_type(
        self, *, blockchain_event_id: str, name: str, price_wei: str, total_supply: int
    ) -> RegisteredTicketType:
        data = await self._request(
            'POST',
            '/ticket-types/register',
            operation='RegisterTicketTypeOnBlockchain',
            timeout=self.mint_timeout,
            json={
                'blockchain_event_id': blockchain_event_id,
                'name': name,
                'price_wei': price_wei,
                'total_supply': total_supply,
            },
        )
        return RegisteredTicketType(
            blockchain_ticket_type_id=str(data.get('blockchain_ticket_type_id') or ''),
            transaction_hash=data.get('transaction_hash', ''),
        )
