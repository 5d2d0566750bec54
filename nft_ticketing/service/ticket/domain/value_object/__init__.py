"""Ticket Domain Value Objects"""

from nft_ticketing.service.ticket.domain.value_object.check_in_credential import (
    CheckInCredential,
)
from nft_ticketing.service.ticket.domain.value_object.fee_split import FeeSplit
from nft_ticketing.service.ticket.domain.value_object.seat_info import SeatInfo

__all__ = ['CheckInCredential', 'FeeSplit', 'SeatInfo']
