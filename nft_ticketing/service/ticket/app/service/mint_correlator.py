"""
Pairs minted tokens with the tickets of a purchase.

When every token echoes its token URI, ticket i takes the token whose URI is
``metadata_uris[i]``. Otherwise tokens are taken in chain-log order against
tickets in batch-index order.
"""

from typing import List, Tuple

from nft_ticketing.platform.exception.exceptions import FailedPreconditionError
from nft_ticketing.service.ticket.app.dto.blockchain_dto import MintedToken
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket


def correlate_tokens(
    *, tickets: List[Ticket], metadata_uris: List[str], minted_tokens: List[MintedToken]
) -> List[Tuple[Ticket, MintedToken, str]]:
    if len(minted_tokens) != len(tickets):
        raise FailedPreconditionError(
            f'Minted token count {len(minted_tokens)} does not match ticket count {len(tickets)}'
        )
    if len(metadata_uris) < len(tickets):
        raise FailedPreconditionError(
            f'Metadata not prepared: {len(metadata_uris)} URIs for {len(tickets)} tickets'
        )

    ordered = sorted(tickets, key=lambda ticket: ticket.batch_index)

    if minted_tokens and all(token.token_uri for token in minted_tokens):
        by_uri = {token.token_uri: token for token in minted_tokens}
        pairs = []
        for ticket in ordered:
            uri = metadata_uris[ticket.batch_index]
            token = by_uri.get(uri)
            if token is None:
                raise FailedPreconditionError(
                    f'No minted token carries metadata URI {uri} for ticket {ticket.id}'
                )
            pairs.append((ticket, token, uri))
        return pairs

    return [
        (ticket, token, metadata_uris[ticket.batch_index])
        for ticket, token in zip(ordered, minted_tokens)
    ]
