from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, delete, extract, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nft_ticketing.platform.database.datetime_util import as_utc
from nft_ticketing.platform.exception.exceptions import AlreadyExistsError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.interface.i_ticket_repo import ITicketRepo
from nft_ticketing.service.ticket.domain.entity.ticket_entity import Ticket
from nft_ticketing.service.ticket.domain.enum.ticket_status import (
    RESERVING_STATUSES,
    SOLD_STATUSES,
    CheckInStatus,
    TicketStatus,
)
from nft_ticketing.service.ticket.domain.value_object.seat_info import SeatInfo
from nft_ticketing.service.ticket.driven_adapter.model.ticket_model import TicketModel


_RESERVING = [status.value for status in RESERVING_STATUSES]
_SOLD = [status.value for status in SOLD_STATUSES]


class TicketRepoImpl(ITicketRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_ticket: TicketModel) -> Ticket:
        seat_info = None
        if db_ticket.seat_key:
            seat_info = SeatInfo(
                seat_key=db_ticket.seat_key,
                section=db_ticket.seat_section or '',
                row=db_ticket.seat_row or 0,
                seat=db_ticket.seat_number or 0,
            )
        return Ticket(
            id=db_ticket.id,
            purchase_id=db_ticket.purchase_id,
            batch_index=db_ticket.batch_index,
            event_id=db_ticket.event_id,
            ticket_type_id=db_ticket.ticket_type_id,
            session_id=db_ticket.session_id,
            owner_address=db_ticket.owner_address,
            status=TicketStatus(db_ticket.status),
            token_id=db_ticket.token_id or '',
            token_uri_cid=db_ticket.token_uri_cid,
            transaction_hash=db_ticket.transaction_hash,
            qr_code_secret=db_ticket.qr_code_secret or '',
            check_in_status=CheckInStatus(db_ticket.check_in_status),
            check_in_time=as_utc(db_ticket.check_in_time),
            check_in_location=db_ticket.check_in_location,
            check_in_scanner_id=db_ticket.check_in_scanner_id,
            expiry_time=as_utc(db_ticket.expiry_time),
            seat_info=seat_info,
            created_at=as_utc(db_ticket.created_at),
            updated_at=as_utc(db_ticket.updated_at),
        )

    @staticmethod
    def _to_model(ticket: Ticket) -> TicketModel:
        seat = ticket.seat_info
        return TicketModel(
            id=ticket.id,
            purchase_id=ticket.purchase_id,
            batch_index=ticket.batch_index,
            event_id=ticket.event_id,
            ticket_type_id=ticket.ticket_type_id,
            session_id=ticket.session_id,
            owner_address=ticket.owner_address,
            status=ticket.status.value,
            token_id=ticket.token_id or None,
            token_uri_cid=ticket.token_uri_cid,
            transaction_hash=ticket.transaction_hash,
            qr_code_secret=ticket.qr_code_secret or None,
            check_in_status=ticket.check_in_status.value,
            check_in_time=ticket.check_in_time,
            check_in_location=ticket.check_in_location,
            check_in_scanner_id=ticket.check_in_scanner_id,
            expiry_time=ticket.expiry_time,
            seat_key=seat.seat_key if seat else None,
            seat_section=seat.section if seat else None,
            seat_row=seat.row if seat else None,
            seat_number=seat.seat if seat else None,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
        )

    # Command side

    @Logger.io
    async def create_many(self, *, tickets: List[Ticket]) -> List[Ticket]:
        self.session.add_all([self._to_model(ticket) for ticket in tickets])
        try:
            await self.session.flush()
        except IntegrityError:
            seats = [ticket.seat_key for ticket in tickets if ticket.seat_key]
            raise AlreadyExistsError(
                f'Seats already taken: {", ".join(seats)}' if seats else 'Tickets already exist'
            )
        return tickets

    @Logger.io
    async def mark_minted(self, *, ticket: Ticket) -> bool:
        try:
            result = await self.session.execute(
                update(TicketModel)
                .execution_options(synchronize_session=False)
                .where(
                    TicketModel.id == ticket.id,
                    TicketModel.status != TicketStatus.MINTED.value,
                )
                .values(
                    status=TicketStatus.MINTED.value,
                    token_id=ticket.token_id,
                    token_uri_cid=ticket.token_uri_cid,
                    transaction_hash=ticket.transaction_hash,
                    qr_code_secret=ticket.qr_code_secret,
                    expiry_time=ticket.expiry_time,
                    updated_at=ticket.updated_at or datetime.now(timezone.utc),
                )
            )
        except IntegrityError:
            raise AlreadyExistsError(f'Token {ticket.token_id} is already assigned to a ticket')
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def claim_for_mint(self, *, ticket: Ticket) -> bool:
        result = await self.session.execute(
            update(TicketModel)
            .execution_options(synchronize_session=False)
            .where(
                TicketModel.id == ticket.id,
                TicketModel.status.in_(
                    [TicketStatus.PENDING_PAYMENT.value, TicketStatus.PAID.value]
                ),
                TicketModel.token_id.is_(None),
            )
            .values(status=TicketStatus.MINTING.value, updated_at=ticket.updated_at)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def record_mint_token(self, *, ticket: Ticket) -> bool:
        try:
            result = await self.session.execute(
                update(TicketModel)
                .execution_options(synchronize_session=False)
                .where(
                    TicketModel.id == ticket.id,
                    TicketModel.status == TicketStatus.MINTING.value,
                    TicketModel.token_id.is_(None),
                )
                .values(
                    token_id=ticket.token_id,
                    token_uri_cid=ticket.token_uri_cid,
                    updated_at=ticket.updated_at,
                )
            )
        except IntegrityError:
            raise AlreadyExistsError(f'Token {ticket.token_id} is already assigned to a ticket')
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def release_mint_claim(self, *, ticket: Ticket) -> bool:
        result = await self.session.execute(
            update(TicketModel)
            .execution_options(synchronize_session=False)
            .where(
                TicketModel.id == ticket.id,
                TicketModel.status == TicketStatus.MINTING.value,
                TicketModel.token_id.is_(None),
            )
            .values(status=TicketStatus.PENDING_PAYMENT.value, updated_at=ticket.updated_at)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def update_credential(
        self, *, ticket_id: str, qr_code_secret: str, expiry_time: Optional[datetime]
    ) -> None:
        await self.session.execute(
            update(TicketModel)
            .execution_options(synchronize_session=False)
            .where(TicketModel.id == ticket_id)
            .values(
                qr_code_secret=qr_code_secret,
                expiry_time=expiry_time,
                updated_at=datetime.now(timezone.utc),
            )
        )

    @Logger.io
    async def check_in_if_not_checked(
        self, *, ticket_id: str, location: str, scanner_id: str, now: datetime
    ) -> bool:
        result = await self.session.execute(
            update(TicketModel)
            .execution_options(synchronize_session=False)
            .where(
                TicketModel.id == ticket_id,
                TicketModel.status == TicketStatus.MINTED.value,
                TicketModel.check_in_status == CheckInStatus.NOT_CHECKED_IN.value,
            )
            .values(
                check_in_status=CheckInStatus.CHECKED_IN.value,
                check_in_time=now,
                check_in_location=location,
                check_in_scanner_id=scanner_id,
                updated_at=now,
            )
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def delete_pending_by_purchase(self, *, purchase_id: str) -> int:
        result = await self.session.execute(
            delete(TicketModel).execution_options(synchronize_session=False).where(
                TicketModel.purchase_id == purchase_id,
                TicketModel.status == TicketStatus.PENDING_PAYMENT.value,
            )
        )
        return result.rowcount  # type: ignore[attr-defined]

    @Logger.io
    async def release_expired_seat_holds(
        self, *, event_id: str, seat_keys: List[str], now: datetime
    ) -> int:
        if not seat_keys:
            return 0
        result = await self.session.execute(
            delete(TicketModel).execution_options(synchronize_session=False).where(
                TicketModel.event_id == event_id,
                TicketModel.seat_key.in_(seat_keys),
                TicketModel.status == TicketStatus.PENDING_PAYMENT.value,
                TicketModel.expiry_time < now,
            )
        )
        return result.rowcount  # type: ignore[attr-defined]

    @Logger.io
    async def list_ticket_type_ids_with_expired_pending(self, *, now: datetime) -> List[str]:
        result = await self.session.execute(
            select(TicketModel.ticket_type_id)
            .where(
                TicketModel.status == TicketStatus.PENDING_PAYMENT.value,
                TicketModel.expiry_time < now,
            )
            .distinct()
        )
        return sorted(result.scalars().all())

    @Logger.io
    async def delete_expired_pending(self, *, now: datetime) -> int:
        result = await self.session.execute(
            delete(TicketModel).execution_options(synchronize_session=False).where(
                TicketModel.status == TicketStatus.PENDING_PAYMENT.value,
                TicketModel.expiry_time < now,
            )
        )
        return result.rowcount  # type: ignore[attr-defined]

    # Query side

    @Logger.io
    async def get_by_id(self, *, ticket_id: str) -> Optional[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.id == ticket_id)
            .execution_options(populate_existing=True)
        )
        db_ticket = result.scalar_one_or_none()
        return self._to_entity(db_ticket) if db_ticket else None

    @Logger.io
    async def get_by_qr_code_secret(self, *, qr_code_secret: str) -> Optional[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.qr_code_secret == qr_code_secret)
            .execution_options(populate_existing=True)
        )
        db_ticket = result.scalars().first()
        return self._to_entity(db_ticket) if db_ticket else None

    @Logger.io
    async def list_by_purchase(self, *, purchase_id: str) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.purchase_id == purchase_id)
            .order_by(TicketModel.batch_index)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def find_taken_seats(self, *, event_id: str, seat_keys: List[str]) -> List[str]:
        if not seat_keys:
            return []
        result = await self.session.execute(
            select(TicketModel.seat_key).where(
                TicketModel.event_id == event_id, TicketModel.seat_key.in_(seat_keys)
            )
        )
        return sorted(key for key in result.scalars().all() if key)

    @Logger.io
    async def count_for_availability(self, *, ticket_type_id: str, now: datetime) -> Tuple[int, int]:
        minted = await self.session.scalar(
            select(func.count(TicketModel.id)).where(
                TicketModel.ticket_type_id == ticket_type_id,
                TicketModel.status == TicketStatus.MINTED.value,
            )
        )
        reserved = await self.session.scalar(
            select(func.count(TicketModel.id)).where(
                TicketModel.ticket_type_id == ticket_type_id,
                TicketModel.status.in_(_RESERVING),
                TicketModel.expiry_time > now,
            )
        )
        return int(minted or 0), int(reserved or 0)

    @Logger.io
    async def list_by_event(self, *, event_id: str, limit: int, offset: int) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.event_id == event_id)
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_by_owner(self, *, owner_address: str, limit: int, offset: int) -> List[Ticket]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.owner_address == owner_address)
            .order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_all(
        self, *, limit: int, offset: int, status: Optional[TicketStatus] = None
    ) -> List[Ticket]:
        stmt = select(TicketModel)
        if status is not None:
            stmt = stmt.where(TicketModel.status == status.value)
        result = await self.session.execute(
            stmt.order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_sold_seat_keys(self, *, event_id: str, now: datetime) -> List[str]:
        result = await self.session.execute(
            select(TicketModel.seat_key).where(
                TicketModel.event_id == event_id,
                TicketModel.seat_key.is_not(None),
                or_(
                    TicketModel.status.in_(_SOLD),
                    and_(
                        TicketModel.status == TicketStatus.PENDING_PAYMENT.value,
                        TicketModel.expiry_time > now,
                    ),
                ),
            )
        )
        return sorted(result.scalars().all())

    # Analytics

    @Logger.io
    async def count_by_status(self, *, event_id: str) -> Dict[str, int]:
        result = await self.session.execute(
            select(TicketModel.status, func.count(TicketModel.id))
            .where(TicketModel.event_id == event_id)
            .group_by(TicketModel.status)
        )
        return {status: int(count) for status, count in result.all()}

    @Logger.io
    async def count_check_in_status(
        self, *, event_id: str, since: Optional[datetime] = None
    ) -> Tuple[int, int]:
        stmt = select(TicketModel.check_in_status, func.count(TicketModel.id)).where(
            TicketModel.event_id == event_id,
            TicketModel.status == TicketStatus.MINTED.value,
        )
        result = await self.session.execute(stmt.group_by(TicketModel.check_in_status))
        counts = {status: int(count) for status, count in result.all()}
        checked_in = counts.get(CheckInStatus.CHECKED_IN.value, 0)
        if since is not None:
            checked_in = int(
                await self.session.scalar(
                    select(func.count(TicketModel.id)).where(
                        TicketModel.event_id == event_id,
                        TicketModel.status == TicketStatus.MINTED.value,
                        TicketModel.check_in_status == CheckInStatus.CHECKED_IN.value,
                        TicketModel.check_in_time >= since,
                    )
                )
                or 0
            )
        return checked_in, counts.get(CheckInStatus.NOT_CHECKED_IN.value, 0)

    @Logger.io
    async def daily_sold(
        self, *, event_id: str, start: datetime, end: datetime
    ) -> List[Tuple[date, int]]:
        day = func.date(TicketModel.created_at)
        result = await self.session.execute(
            select(day, func.count(TicketModel.id))
            .where(
                TicketModel.event_id == event_id,
                TicketModel.status.in_(_SOLD),
                TicketModel.created_at >= start,
                TicketModel.created_at <= end,
            )
            .group_by(day)
            .order_by(day)
        )
        # SQLite returns the date as ISO text
        return [
            (value if isinstance(value, date) else date.fromisoformat(str(value)), int(count))
            for value, count in result.all()
        ]

    @Logger.io
    async def hourly_check_ins(
        self, *, event_id: str, since: Optional[datetime] = None
    ) -> List[Tuple[int, int]]:
        hour = extract('hour', TicketModel.check_in_time)
        stmt = select(hour, func.count(TicketModel.id)).where(
            TicketModel.event_id == event_id,
            TicketModel.check_in_status == CheckInStatus.CHECKED_IN.value,
        )
        if since is not None:
            stmt = stmt.where(TicketModel.check_in_time >= since)
        result = await self.session.execute(stmt.group_by(hour).order_by(hour))
        return [(int(value), int(count)) for value, count in result.all()]

    @Logger.io
    async def check_ins_by_location(
        self, *, event_id: str, since: Optional[datetime] = None
    ) -> Dict[str, int]:
        stmt = select(TicketModel.check_in_location, func.count(TicketModel.id)).where(
            TicketModel.event_id == event_id,
            TicketModel.check_in_status == CheckInStatus.CHECKED_IN.value,
        )
        if since is not None:
            stmt = stmt.where(TicketModel.check_in_time >= since)
        result = await self.session.execute(stmt.group_by(TicketModel.check_in_location))
        by_location: Dict[str, int] = defaultdict(int)
        for location, count in result.all():
            by_location[location or 'unknown'] += int(count)
        return dict(by_location)

    @Logger.io
    async def count_sold_by_events(self, *, event_ids: List[str]) -> Dict[str, int]:
        if not event_ids:
            return {}
        result = await self.session.execute(
            select(TicketModel.event_id, func.count(TicketModel.id))
            .where(TicketModel.event_id.in_(event_ids), TicketModel.status.in_(_SOLD))
            .group_by(TicketModel.event_id)
        )
        return {event_id: int(count) for event_id, count in result.all()}
