import re

from nft_ticketing.platform.exception.exceptions import InvalidArgumentError


WALLET_ADDRESS_PATTERN = re.compile(r'^0x[0-9a-fA-F]{40}$')
TRANSACTION_HASH_PATTERN = re.compile(r'^0x[0-9a-fA-F]{64}$')


def normalize_wallet_address(address: str) -> str:
    if not isinstance(address, str) or not WALLET_ADDRESS_PATTERN.match(address.strip()):
        raise InvalidArgumentError(f'Invalid wallet address: {address!r}')
    return address.strip().lower()


def validate_transaction_hash(transaction_hash: str) -> str:
    if not isinstance(transaction_hash, str) or not TRANSACTION_HASH_PATTERN.match(
        transaction_hash.strip()
    ):
        raise InvalidArgumentError(f'Invalid transaction hash format: {transaction_hash!r}')
    return transaction_hash.strip().lower()


def parse_wei(value: str | int, *, field: str = 'price_wei') -> int:
    """Wei amounts travel as decimal strings; reject anything but a non-negative integer."""
    try:
        amount = int(str(value).strip())
    except ValueError:
        raise InvalidArgumentError(f'{field} must be an integer string, got {value!r}')
    if amount < 0:
        raise InvalidArgumentError(f'{field} must not be negative')
    return amount
