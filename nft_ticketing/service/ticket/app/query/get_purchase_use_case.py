from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import NotFoundError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.dto.purchase_dto import ConfirmPurchaseResult


class GetPurchaseUseCase:
    def __init__(self, uow: AbstractUnitOfWork):
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])):
        return cls(uow=uow)

    @Logger.io
    async def get_purchase(self, purchase_id: str) -> ConfirmPurchaseResult:
        """Purchase with its tickets in batch order."""
        async with self.uow:
            purchase = await self.uow.purchase_repo.get_by_id(purchase_id=purchase_id)
            if not purchase:
                raise NotFoundError(f'Purchase {purchase_id} not found')
            tickets = await self.uow.ticket_repo.list_by_purchase(purchase_id=purchase_id)
        return ConfirmPurchaseResult(purchase=purchase, tickets=tickets)
