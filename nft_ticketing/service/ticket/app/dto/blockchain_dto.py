"""Blockchain service read models."""

from typing import List, Optional

import attrs


@attrs.define(frozen=True)
class PaymentDetails:
    payment_contract_address: str
    price_wei: str


@attrs.define(frozen=True)
class TransactionVerification:
    is_confirmed: bool
    success_on_chain: bool
    from_address: str = ''
    to_address: str = ''
    value_wei: Optional[str] = None
    block_number: Optional[int] = None


@attrs.define(frozen=True)
class MintedToken:
    token_id: str
    # Empty when the chain log does not echo the URI
    token_uri: str = ''


@attrs.define(frozen=True)
class ParsedMintLogs:
    minted_tokens: List[MintedToken] = attrs.field(factory=list)
    event_id: str = ''
    session_id: str = ''


@attrs.define(frozen=True)
class MintResult:
    token_id: str
    transaction_hash: str


@attrs.define(frozen=True)
class TokenOwnership:
    is_valid_owner: bool
    actual_owner: str = ''


@attrs.define(frozen=True)
class RegisteredTicketType:
    blockchain_ticket_type_id: str
    transaction_hash: str = ''
