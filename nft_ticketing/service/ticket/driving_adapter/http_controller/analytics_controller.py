from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from nft_ticketing.platform.logging.loguru_io import Logger
from nft_ticketing.service.ticket.app.query.get_analytics_use_case import GetAnalyticsUseCase
from nft_ticketing.service.ticket.driving_adapter.schema.analytics_schema import (
    CheckInAnalyticsResponse,
    EventDashboardResponse,
    OrganizerStatsResponse,
)


router = APIRouter()


@router.get('/event/{event_id}/dashboard')
@Logger.io
async def get_event_dashboard(
    event_id: str,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    use_case: GetAnalyticsUseCase = Depends(GetAnalyticsUseCase.depends),
) -> EventDashboardResponse:
    dashboard = await use_case.get_event_dashboard(event_id, start_date, end_date)
    return EventDashboardResponse.from_dto(dashboard)


@router.get('/event/{event_id}/check_in')
@Logger.io
async def get_check_in_analytics(
    event_id: str,
    time_period: str = 'ALL',
    use_case: GetAnalyticsUseCase = Depends(GetAnalyticsUseCase.depends),
) -> CheckInAnalyticsResponse:
    analytics = await use_case.get_check_in_analytics(event_id, time_period)
    return CheckInAnalyticsResponse.from_dto(analytics)


@router.get('/organizer/{organizer_id}')
@Logger.io
async def get_organizer_stats(
    organizer_id: str,
    use_case: GetAnalyticsUseCase = Depends(GetAnalyticsUseCase.depends),
) -> OrganizerStatsResponse:
    return OrganizerStatsResponse.from_dto(await use_case.get_organizer_stats(organizer_id))
