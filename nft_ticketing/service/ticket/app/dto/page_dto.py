from typing import Generic, List, Optional, TypeVar

import attrs

from nft_ticketing.platform.config.core_setting import settings
from nft_ticketing.platform.exception.exceptions import InvalidArgumentError


_T = TypeVar('_T')


@attrs.define(frozen=True)
class PageRequest:
    """Offset pagination; the page token is the decimal offset of the next row."""

    limit: int
    offset: int

    @classmethod
    def parse(cls, *, page_size: Optional[int] = None, page_token: Optional[str] = None) -> 'PageRequest':
        if page_size is None or page_size <= 0:
            limit = settings.DEFAULT_PAGE_SIZE
        else:
            limit = min(page_size, settings.MAX_PAGE_SIZE)

        offset = 0
        if page_token:
            if not page_token.isdigit():
                raise InvalidArgumentError(f'Invalid page_token: {page_token!r}')
            offset = int(page_token)
        return cls(limit=limit, offset=offset)

    @property
    def fetch_size(self) -> int:
        # One extra row tells whether another page exists
        return self.limit + 1


@attrs.define(frozen=True)
class Page(Generic[_T]):
    items: List[_T]
    next_page_token: str = ''

    @classmethod
    def from_rows(cls, rows: List[_T], request: PageRequest) -> 'Page[_T]':
        if len(rows) > request.limit:
            return cls(items=rows[: request.limit], next_page_token=str(request.offset + request.limit))
        return cls(items=rows)
