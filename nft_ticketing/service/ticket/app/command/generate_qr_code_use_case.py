from datetime import datetime, timezone
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import (
    CustomBaseError,
    FailedPreconditionError,
    NotFoundError,
)
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.platform.metrics.ticketing_metrics import metrics
from nft_ticketing.service.ticket.app.dto.check_in_dto import QrCodeResult
from nft_ticketing.service.ticket.app.interface.i_event_service_client import IEventServiceClient
from nft_ticketing.service.ticket.app.interface.i_qr_code_renderer import IQrCodeRenderer
from nft_ticketing.service.ticket.app.service.credential_issuer import CredentialIssuer
from nft_ticketing.service.ticket.domain.enum.ticket_status import TicketStatus


class GenerateQrCodeUseCase:
    """
    Return the ticket's check-in QR code.

    The stored credential is reused while fresh; a missing or stale one is
    re-signed and stored. A ticket without an expiry gets it backfilled from
    the event session end.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        event_client: IEventServiceClient,
        credential_issuer: CredentialIssuer,
        qr_code_renderer: IQrCodeRenderer,
    ) -> None:
        self.uow = uow
        self.event_client = event_client
        self.credential_issuer = credential_issuer
        self.qr_code_renderer = qr_code_renderer
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        event_client: IEventServiceClient = Depends(Provide[Container.event_service_client]),
        credential_issuer: CredentialIssuer = Depends(Provide[Container.credential_issuer]),
        qr_code_renderer: IQrCodeRenderer = Depends(Provide[Container.qr_code_renderer]),
    ) -> Self:
        return cls(
            uow=uow,
            event_client=event_client,
            credential_issuer=credential_issuer,
            qr_code_renderer=qr_code_renderer,
        )

    @Logger.io
    async def execute(self, *, ticket_id: str) -> QrCodeResult:
        with self.tracer.start_as_current_span(
            'use_case.generate_qr_code', attributes={'ticket.id': ticket_id}
        ):
            now = datetime.now(timezone.utc)
            async with self.uow:
                ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError(f'Ticket {ticket_id} not found')
            if ticket.status != TicketStatus.MINTED:
                raise FailedPreconditionError(
                    f'Ticket {ticket_id} is {ticket.status.value}; QR codes exist only for MINTED tickets'
                )

            expiry_time = ticket.expiry_time
            if expiry_time is None:
                expiry_time = await self._session_end(
                    event_id=ticket.event_id, session_id=ticket.session_id
                )

            qr_code_data = ticket.qr_code_secret
            reissued = self.credential_issuer.needs_refresh(stored=qr_code_data, now=now)
            if reissued:
                qr_code_data = self.credential_issuer.issue(ticket=ticket, now=now).to_json()
                metrics.record_qr_code_issued(reason='missing' if not ticket.qr_code_secret else 'stale')

            if reissued or expiry_time != ticket.expiry_time:
                async with self.uow:
                    await self.uow.ticket_repo.update_credential(
                        ticket_id=ticket.id, qr_code_secret=qr_code_data, expiry_time=expiry_time
                    )
                    await self.uow.commit()

            return QrCodeResult(
                ticket_id=ticket.id,
                qr_code_data=qr_code_data,
                qr_code_image_base64=self.qr_code_renderer.render_data_uri(qr_code_data),
                reissued=reissued,
            )

    async def _session_end(self, *, event_id: str, session_id: str) -> datetime | None:
        try:
            event = await self.event_client.get_event(event_id=event_id)
        except CustomBaseError as e:
            Logger.base.warning(f'⚠️ [QR] Cannot backfill expiry for event {event_id}: {e.message}')
            return None
        session = event.find_session(session_id)
        return session.end_datetime if session and session.end_time > 0 else None
