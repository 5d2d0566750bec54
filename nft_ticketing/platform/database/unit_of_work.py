"""
Unit of Work: one database session and transaction shared by the repositories

Usage in a use case:
    async with self.uow:
        ticket_type = await self.uow.ticket_type_repo.get_by_id_for_update(...)
        ...
        await self.uow.commit()

Leaving the block without commit() rolls back. A UoW instance can be entered
again after it exits; each entry opens a fresh session.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from nft_ticketing.service.ticket.app.interface.i_ledger_repo import ILedgerRepo
    from nft_ticketing.service.ticket.app.interface.i_purchase_repo import IPurchaseRepo
    from nft_ticketing.service.ticket.app.interface.i_ticket_repo import ITicketRepo
    from nft_ticketing.service.ticket.app.interface.i_ticket_type_repo import ITicketTypeRepo


class AbstractUnitOfWork(abc.ABC):
    ticket_type_repo: ITicketTypeRepo
    purchase_repo: IPurchaseRepo
    ticket_repo: ITicketRepo
    ledger_repo: ILedgerRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, *, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from nft_ticketing.service.ticket.driven_adapter.repo.ledger_repo_impl import (
            LedgerRepoImpl,
        )
        from nft_ticketing.service.ticket.driven_adapter.repo.purchase_repo_impl import (
            PurchaseRepoImpl,
        )
        from nft_ticketing.service.ticket.driven_adapter.repo.ticket_repo_impl import (
            TicketRepoImpl,
        )
        from nft_ticketing.service.ticket.driven_adapter.repo.ticket_type_repo_impl import (
            TicketTypeRepoImpl,
        )

        self.session = self._session_factory()

        # Every repository shares the one session
        self.ticket_type_repo = TicketTypeRepoImpl(session=self.session)
        self.purchase_repo = PurchaseRepoImpl(session=self.session)
        self.ticket_repo = TicketRepoImpl(session=self.session)
        self.ledger_repo = LedgerRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args: Any) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
            self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'UnitOfWork used outside "async with"'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
