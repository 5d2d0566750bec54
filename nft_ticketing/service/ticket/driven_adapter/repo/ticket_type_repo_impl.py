from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nft_ticketing.platform.database.datetime_util import as_utc
from nft_ticketing.platform.exception.exceptions import AlreadyExistsError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.interface.i_ticket_type_repo import ITicketTypeRepo
from nft_ticketing.service.ticket.domain.entity.ticket_type_entity import TicketType
from nft_ticketing.service.ticket.driven_adapter.model.ticket_type_model import TicketTypeModel


class TicketTypeRepoImpl(ITicketTypeRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_ticket_type: TicketTypeModel) -> TicketType:
        return TicketType(
            id=db_ticket_type.id,
            event_id=db_ticket_type.event_id,
            session_id=db_ticket_type.session_id,
            contract_session_id=db_ticket_type.contract_session_id,
            blockchain_event_id=db_ticket_type.blockchain_event_id,
            blockchain_ticket_type_id=db_ticket_type.blockchain_ticket_type_id,
            name=db_ticket_type.name,
            description=db_ticket_type.description,
            total_quantity=db_ticket_type.total_quantity,
            available_quantity=db_ticket_type.available_quantity,
            price_wei=db_ticket_type.price_wei,
            created_at=as_utc(db_ticket_type.created_at),
            updated_at=as_utc(db_ticket_type.updated_at),
        )

    @Logger.io
    async def create(self, *, ticket_type: TicketType) -> TicketType:
        self.session.add(
            TicketTypeModel(
                id=ticket_type.id,
                event_id=ticket_type.event_id,
                session_id=ticket_type.session_id,
                contract_session_id=ticket_type.contract_session_id,
                blockchain_event_id=ticket_type.blockchain_event_id,
                blockchain_ticket_type_id=ticket_type.blockchain_ticket_type_id,
                name=ticket_type.name,
                description=ticket_type.description,
                total_quantity=ticket_type.total_quantity,
                available_quantity=ticket_type.available_quantity,
                price_wei=ticket_type.price_wei,
                created_at=ticket_type.created_at,
                updated_at=ticket_type.updated_at,
            )
        )
        try:
            await self.session.flush()
        except IntegrityError:
            raise AlreadyExistsError(
                f'Ticket type {ticket_type.name!r} already exists for event {ticket_type.event_id}'
            )
        return ticket_type

    @Logger.io
    async def get_by_id(self, *, ticket_type_id: str) -> Optional[TicketType]:
        result = await self.session.execute(
            select(TicketTypeModel)
            .where(TicketTypeModel.id == ticket_type_id)
            .execution_options(populate_existing=True)
        )
        db_ticket_type = result.scalar_one_or_none()
        return self._to_entity(db_ticket_type) if db_ticket_type else None

    async def _lock_row_on_sqlite(self, *, ticket_type_id: str) -> None:
        # SQLite drops FOR UPDATE; a no-op write takes the database write lock
        # for the rest of the transaction instead
        if self.session.get_bind().dialect.name != 'sqlite':
            return
        await self.session.execute(
            update(TicketTypeModel)
            .execution_options(synchronize_session=False)
            .where(TicketTypeModel.id == ticket_type_id)
            .values(id=TicketTypeModel.id)
        )

    @Logger.io
    async def get_by_id_for_update(self, *, ticket_type_id: str) -> Optional[TicketType]:
        await self._lock_row_on_sqlite(ticket_type_id=ticket_type_id)
        result = await self.session.execute(
            select(TicketTypeModel)
            .where(TicketTypeModel.id == ticket_type_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        db_ticket_type = result.scalar_one_or_none()
        return self._to_entity(db_ticket_type) if db_ticket_type else None

    @Logger.io
    async def lock_many(self, *, ticket_type_ids: List[str]) -> None:
        # Sorted order keeps concurrent sweeps from deadlocking each other
        for ticket_type_id in sorted(set(ticket_type_ids)):
            await self._lock_row_on_sqlite(ticket_type_id=ticket_type_id)
            await self.session.execute(
                select(TicketTypeModel.id)
                .where(TicketTypeModel.id == ticket_type_id)
                .with_for_update()
            )

    @Logger.io
    async def exists_by_event_and_name(
        self, *, event_id: str, name: str, exclude_id: Optional[str] = None
    ) -> bool:
        stmt = select(TicketTypeModel.id).where(
            TicketTypeModel.event_id == event_id, TicketTypeModel.name == name
        )
        if exclude_id:
            stmt = stmt.where(TicketTypeModel.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    @Logger.io
    async def update(self, *, ticket_type: TicketType) -> TicketType:
        try:
            await self.session.execute(
                update(TicketTypeModel)
                .execution_options(synchronize_session=False)
                .where(TicketTypeModel.id == ticket_type.id)
                .values(
                    name=ticket_type.name,
                    description=ticket_type.description,
                    total_quantity=ticket_type.total_quantity,
                    available_quantity=ticket_type.available_quantity,
                    price_wei=ticket_type.price_wei,
                    blockchain_event_id=ticket_type.blockchain_event_id,
                    blockchain_ticket_type_id=ticket_type.blockchain_ticket_type_id,
                    updated_at=ticket_type.updated_at or datetime.now(timezone.utc),
                )
            )
        except IntegrityError:
            raise AlreadyExistsError(
                f'Ticket type {ticket_type.name!r} already exists for event {ticket_type.event_id}'
            )
        return ticket_type

    @Logger.io
    async def set_available_quantity(self, *, ticket_type_id: str, available_quantity: int) -> None:
        await self.session.execute(
            update(TicketTypeModel)
            .execution_options(synchronize_session=False)
            .where(TicketTypeModel.id == ticket_type_id)
            .values(available_quantity=available_quantity, updated_at=datetime.now(timezone.utc))
        )

    @Logger.io
    async def try_reserve(self, *, ticket_type_id: str, quantity: int) -> bool:
        result = await self.session.execute(
            update(TicketTypeModel)
            .execution_options(synchronize_session=False)
            .where(
                TicketTypeModel.id == ticket_type_id,
                TicketTypeModel.available_quantity >= quantity,
            )
            .values(
                available_quantity=TicketTypeModel.available_quantity - quantity,
                updated_at=datetime.now(timezone.utc),
            )
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def list_by_event(self, *, event_id: str) -> List[TicketType]:
        result = await self.session.execute(
            select(TicketTypeModel)
            .where(TicketTypeModel.event_id == event_id)
            .order_by(TicketTypeModel.created_at, TicketTypeModel.id)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_by_session(self, *, session_id: str) -> List[TicketType]:
        result = await self.session.execute(
            select(TicketTypeModel)
            .where(TicketTypeModel.session_id == session_id)
            .order_by(TicketTypeModel.created_at, TicketTypeModel.id)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_all(
        self,
        *,
        limit: int,
        offset: int,
        published: Optional[bool] = None,
        event_id: Optional[str] = None,
    ) -> List[TicketType]:
        stmt = select(TicketTypeModel)
        if event_id:
            stmt = stmt.where(TicketTypeModel.event_id == event_id)
        if published is True:
            stmt = stmt.where(TicketTypeModel.blockchain_ticket_type_id != '')
        elif published is False:
            stmt = stmt.where(TicketTypeModel.blockchain_ticket_type_id == '')
        result = await self.session.execute(
            stmt.order_by(TicketTypeModel.created_at.desc(), TicketTypeModel.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [self._to_entity(row) for row in result.scalars().all()]
