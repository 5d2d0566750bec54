import attrs

from nft_ticketing.platform.exception.exceptions import InvalidArgumentError


@attrs.frozen
class FeeSplit:
    amount_wei: int
    platform_fee_wei: int
    organizer_amount_wei: int
    fee_percent: int

    @classmethod
    def compute(cls, *, amount_wei: int, fee_percent: int) -> 'FeeSplit':
        if amount_wei < 0:
            raise InvalidArgumentError('amount_wei must not be negative')
        if not 0 <= fee_percent <= 100:
            raise InvalidArgumentError('fee_percent must be between 0 and 100')
        platform_fee = amount_wei * fee_percent // 100
        return cls(
            amount_wei=amount_wei,
            platform_fee_wei=platform_fee,
            organizer_amount_wei=amount_wei - platform_fee,
            fee_percent=fee_percent,
        )
