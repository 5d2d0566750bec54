from datetime import datetime, timezone
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import (
    AlreadyExistsError,
    CustomBaseError,
    FailedPreconditionError,
    NotFoundError,
)
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.platform.metrics.ticketing_metrics import metrics
from nft_ticketing.service.ticket.app.dto.check_in_dto import CheckInResult
from nft_ticketing.service.ticket.app.interface.i_blockchain_service_client import (
    IBlockchainServiceClient,
)
from nft_ticketing.service.ticket.app.service.credential_issuer import CredentialIssuer
from nft_ticketing.service.ticket.domain.value_object.check_in_credential import (
    CheckInCredential,
)


class CheckInUseCase:
    """
    Admit a ticket holder from a scanned QR credential.

    Check order: payload shape, stored credential lookup, signature and
    message, age, ticket status, on-chain ownership, then a conditional
    NOT_CHECKED_IN -> CHECKED_IN update. There is no undo.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        blockchain_client: IBlockchainServiceClient,
        credential_issuer: CredentialIssuer,
    ) -> None:
        self.uow = uow
        self.blockchain_client = blockchain_client
        self.credential_issuer = credential_issuer
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        blockchain_client: IBlockchainServiceClient = Depends(
            Provide[Container.blockchain_service_client]
        ),
        credential_issuer: CredentialIssuer = Depends(Provide[Container.credential_issuer]),
    ) -> Self:
        return cls(
            uow=uow, blockchain_client=blockchain_client, credential_issuer=credential_issuer
        )

    @Logger.io
    async def execute(self, *, qr_code_data: str, location: str = '', scanner_id: str = '') -> CheckInResult:
        with self.tracer.start_as_current_span('use_case.check_in'):
            try:
                result = await self._check_in(
                    qr_code_data=qr_code_data, location=location, scanner_id=scanner_id
                )
            except CustomBaseError:
                metrics.record_check_in(result='rejected')
                raise
            metrics.record_check_in(result='success')
            return result

    async def _check_in(self, *, qr_code_data: str, location: str, scanner_id: str) -> CheckInResult:
        now = datetime.now(timezone.utc)
        credential = CheckInCredential.from_json(qr_code_data)

        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_qr_code_secret(
                qr_code_secret=credential.to_json()
            )
        if not ticket or ticket.id != credential.ticket_id:
            raise NotFoundError('No ticket matches this QR code')

        self.credential_issuer.verify_signature(credential=credential)
        self.credential_issuer.verify_freshness(credential=credential, now=now)
        ticket.ensure_checkable()

        if ticket.token_id:
            ownership = await self.blockchain_client.verify_token_ownership(
                token_id=ticket.token_id, expected_owner=ticket.owner_address
            )
            if not ownership.is_valid_owner:
                raise FailedPreconditionError(
                    f'Token {ticket.token_id} is no longer owned by {ticket.owner_address}'
                )

        checked_in = ticket.check_in(location=location, scanner_id=scanner_id, now=now)
        async with self.uow:
            if not await self.uow.ticket_repo.check_in_if_not_checked(
                ticket_id=ticket.id, location=location, scanner_id=scanner_id, now=now
            ):
                raise AlreadyExistsError(f'Ticket {ticket.id} already checked in')
            await self.uow.commit()

        Logger.base.info(
            f'🚪 [CHECK-IN] Ticket {ticket.id} admitted at {location or "unknown location"}'
        )
        return CheckInResult(ticket=checked_in)
