import re
from typing import Any, Iterable, Optional

import attrs

from nft_ticketing.platform.exception.exceptions import InvalidArgumentError


_SEAT_KEY_PATTERN = re.compile(r'^(?P<section>[A-Za-z0-9]+)-(?P<row>\d+)-(?P<seat>\d+)$')


@attrs.frozen
class SeatInfo:
    """A seat key ``SECTION-ROW-SEAT`` (e.g. ``A-3-12``) and its parts."""

    seat_key: str
    section: str
    row: int
    seat: int

    @classmethod
    def parse(cls, seat_key: str) -> 'SeatInfo':
        match = _SEAT_KEY_PATTERN.match(seat_key.strip()) if isinstance(seat_key, str) else None
        if not match:
            raise InvalidArgumentError(
                f'Invalid seat key {seat_key!r}. Expected: SECTION-ROW-SEAT (e.g. A-3-12)'
            )
        row, seat = int(match['row']), int(match['seat'])
        if row <= 0 or seat <= 0:
            raise InvalidArgumentError(f'Row and seat numbers must be positive: {seat_key!r}')
        section = match['section'].upper()
        return cls(seat_key=f'{section}-{row}-{seat}', section=section, row=row, seat=seat)

    @classmethod
    def parse_many(cls, seat_keys: Iterable[str]) -> list['SeatInfo']:
        seats = [cls.parse(key) for key in seat_keys]
        seen: set[str] = set()
        duplicates = []
        for seat in seats:
            if seat.seat_key in seen:
                duplicates.append(seat.seat_key)
            seen.add(seat.seat_key)
        if duplicates:
            raise InvalidArgumentError(f'Duplicate seats selected: {", ".join(duplicates)}')
        return seats

    def to_dict(self) -> dict[str, Any]:
        return attrs.asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Optional['SeatInfo']:
        if not data:
            return None
        return cls(
            seat_key=data['seat_key'],
            section=data['section'],
            row=int(data['row']),
            seat=int(data['seat']),
        )
