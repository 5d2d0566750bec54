from datetime import datetime, timedelta, timezone
from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from nft_ticketing.platform.config.di import Container
from nft_ticketing.platform.database.unit_of_work import AbstractUnitOfWork
from nft_ticketing.platform.exception.exceptions import InvalidArgumentError
from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.dto.analytics_dto import (
    CheckInAnalytics,
    DailySales,
    EventDashboard,
    HourlyCheckIns,
    OrganizerStats,
)
from nft_ticketing.service.ticket.app.interface.i_event_service_client import IEventServiceClient
from nft_ticketing.service.ticket.domain.enum.ledger_status import PlatformTransactionStatus


DASHBOARD_DEFAULT_DAYS = 30
TIME_PERIODS = ('TODAY', 'WEEK', 'ALL')


class GetAnalyticsUseCase:
    def __init__(self, uow: AbstractUnitOfWork, event_client: IEventServiceClient):
        self.uow = uow
        self.event_client = event_client

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        event_client: IEventServiceClient = Depends(Provide[Container.event_service_client]),
    ):
        return cls(uow=uow, event_client=event_client)

    @Logger.io
    async def get_event_dashboard(
        self,
        event_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> EventDashboard:
        end = _aware(end_date) if end_date else datetime.now(timezone.utc)
        start = _aware(start_date) if start_date else end - timedelta(days=DASHBOARD_DEFAULT_DAYS)
        if start > end:
            raise InvalidArgumentError('start_date must not be after end_date')

        async with self.uow:
            ticket_counts = await self.uow.ticket_repo.count_by_status(event_id=event_id)
            received = await self.uow.ledger_repo.list_platform_transactions(
                event_ids=[event_id],
                status=PlatformTransactionStatus.RECEIVED,
                created_from=start,
                created_to=end,
            )
            checked_in, not_checked_in = await self.uow.ticket_repo.count_check_in_status(
                event_id=event_id
            )
            daily = await self.uow.ticket_repo.daily_sold(event_id=event_id, start=start, end=end)

        return EventDashboard(
            event_id=event_id,
            start_date=start,
            end_date=end,
            ticket_counts=ticket_counts,
            total_revenue_wei=str(sum(int(tx.amount_wei) for tx in received)),
            platform_fee_wei=str(sum(int(tx.platform_fee_wei) for tx in received)),
            organizer_revenue_wei=str(sum(int(tx.organizer_amount_wei) for tx in received)),
            checked_in=checked_in,
            not_checked_in=not_checked_in,
            daily_sales=[DailySales(day=day, tickets_sold=count) for day, count in daily],
        )

    @Logger.io
    async def get_organizer_stats(self, organizer_id: str) -> OrganizerStats:
        events = await self.event_client.list_events_by_organizer(organizer_id=organizer_id)
        event_ids = [event.id for event in events]
        if not event_ids:
            return OrganizerStats(
                organizer_id=organizer_id,
                total_events=0,
                events_with_sales=0,
                total_tickets_sold=0,
                total_revenue_wei='0',
            )

        async with self.uow:
            sold_by_event = await self.uow.ticket_repo.count_sold_by_events(event_ids=event_ids)
            transactions = await self.uow.ledger_repo.list_platform_transactions(
                event_ids=event_ids
            )

        return OrganizerStats(
            organizer_id=organizer_id,
            total_events=len(event_ids),
            events_with_sales=sum(1 for count in sold_by_event.values() if count > 0),
            total_tickets_sold=sum(sold_by_event.values()),
            total_revenue_wei=str(sum(int(tx.organizer_amount_wei) for tx in transactions)),
        )

    @Logger.io
    async def get_check_in_analytics(
        self, event_id: str, time_period: str = 'ALL'
    ) -> CheckInAnalytics:
        period = (time_period or 'ALL').upper()
        if period not in TIME_PERIODS:
            raise InvalidArgumentError(
                f'time_period must be one of {", ".join(TIME_PERIODS)}, got {time_period!r}'
            )
        since = _period_start(period, now=datetime.now(timezone.utc))

        async with self.uow:
            checked_in, not_checked_in = await self.uow.ticket_repo.count_check_in_status(
                event_id=event_id, since=since
            )
            hourly = await self.uow.ticket_repo.hourly_check_ins(event_id=event_id, since=since)
            by_location = await self.uow.ticket_repo.check_ins_by_location(
                event_id=event_id, since=since
            )

        return CheckInAnalytics(
            event_id=event_id,
            time_period=period,
            total_checked_in=checked_in,
            total_not_checked_in=not_checked_in,
            hourly=[HourlyCheckIns(hour=hour, count=count) for hour, count in hourly],
            by_location=by_location,
        )


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _period_start(period: str, *, now: datetime) -> Optional[datetime]:
    match period:
        case 'TODAY':
            return now.replace(hour=0, minute=0, second=0, microsecond=0)
        case 'WEEK':
            return now - timedelta(days=7)
        case _:
            return None
