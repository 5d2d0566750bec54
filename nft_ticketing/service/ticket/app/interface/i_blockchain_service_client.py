from abc import ABC, abstractmethod

from nft_ticketing.service.ticket.app.dto.blockchain_dto import (
    MintResult,
    ParsedMintLogs,
    PaymentDetails,
    RegisteredTicketType,
    TokenOwnership,
    TransactionVerification,
)


class IBlockchainServiceClient(ABC):
    @abstractmethod
    async def get_ticket_payment_details(
        self, *, blockchain_event_id: str, price_wei: str
    ) -> PaymentDetails:
        pass

    @abstractmethod
    async def verify_transaction(self, *, transaction_hash: str) -> TransactionVerification:
        pass

    @abstractmethod
    async def parse_transaction_logs(self, *, transaction_hash: str) -> ParsedMintLogs:
        pass

    @abstractmethod
    async def mint_ticket(
        self,
        *,
        buyer_address: str,
        token_uri_cid: str,
        blockchain_ticket_type_id: str,
        session_id_for_contract: str,
    ) -> MintResult:
        pass

    @abstractmethod
    async def verify_token_ownership(self, *, token_id: str, expected_owner: str) -> TokenOwnership:
        pass

    @abstractmethod
    async def register_ticket_type(
        self, *, blockchain_event_id: str, name: str, price_wei: str, total_supply: int
    ) -> RegisteredTicketType:
        pass
