from datetime import date, datetime
from typing import Dict, List

from pydantic import BaseModel

from nft_ticketing.service.ticket.app.dto.analytics_dto import (
    CheckInAnalytics,
    EventDashboard,
    OrganizerStats,
)


class DailySalesResponse(BaseModel):
    day: date
    tickets_sold: int


class EventDashboardResponse(BaseModel):
    event_id: str
    start_date: datetime
    end_date: datetime
    ticket_counts: Dict[str, int]
    total_revenue_wei: str
    platform_fee_wei: str
    organizer_revenue_wei: str
    checked_in: int
    not_checked_in: int
    check_in_rate: float
    daily_sales: List[DailySalesResponse]

    @classmethod
    def from_dto(cls, dashboard: EventDashboard) -> 'EventDashboardResponse':
        return cls(
            event_id=dashboard.event_id,
            start_date=dashboard.start_date,
            end_date=dashboard.end_date,
            ticket_counts=dashboard.ticket_counts,
            total_revenue_wei=dashboard.total_revenue_wei,
            platform_fee_wei=dashboard.platform_fee_wei,
            organizer_revenue_wei=dashboard.organizer_revenue_wei,
            checked_in=dashboard.checked_in,
            not_checked_in=dashboard.not_checked_in,
            check_in_rate=dashboard.check_in_rate,
            daily_sales=[
                DailySalesResponse(day=sale.day, tickets_sold=sale.tickets_sold)
                for sale in dashboard.daily_sales
            ],
        )


class OrganizerStatsResponse(BaseModel):
    organizer_id: str
    total_events: int
    events_with_sales: int
    total_tickets_sold: int
    total_revenue_wei: str

    @classmethod
    def from_dto(cls, stats: OrganizerStats) -> 'OrganizerStatsResponse':
        return cls(
            organizer_id=stats.organizer_id,
            total_events=stats.total_events,
            events_with_sales=stats.events_with_sales,
            total_tickets_sold=stats.total_tickets_sold,
            total_revenue_wei=stats.total_revenue_wei,
        )


class HourlyCheckInsResponse(BaseModel):
    hour: int
    count: int


class CheckInAnalyticsResponse(BaseModel):
    event_id: str
    time_period: str
    total_checked_in: int
    total_not_checked_in: int
    hourly: List[HourlyCheckInsResponse]
    by_location: Dict[str, int]

    @classmethod
    def from_dto(cls, analytics: CheckInAnalytics) -> 'CheckInAnalyticsResponse':
        return cls(
            event_id=analytics.event_id,
            time_period=analytics.time_period,
            total_checked_in=analytics.total_checked_in,
            total_not_checked_in=analytics.total_not_checked_in,
            hourly=[HourlyCheckInsResponse(hour=h.hour, count=h.count) for h in analytics.hourly],
            by_location=analytics.by_location,
        )
