from datetime import date, datetime
from typing import Dict, List

import attrs


@attrs.define(frozen=True)
class DailySales:
    day: date
    tickets_sold: int


@attrs.define(frozen=True)
class EventDashboard:
    event_id: str
    start_date: datetime
    end_date: datetime
    ticket_counts: Dict[str, int]
    total_revenue_wei: str
    platform_fee_wei: str
    organizer_revenue_wei: str
    checked_in: int
    not_checked_in: int
    daily_sales: List[DailySales] = attrs.field(factory=list)

    @property
    def check_in_rate(self) -> float:
        total = self.checked_in + self.not_checked_in
        return round(self.checked_in * 100 / total, 2) if total else 0.0


@attrs.define(frozen=True)
class OrganizerStats:
    organizer_id: str
    total_events: int
    events_with_sales: int
    total_tickets_sold: int
    total_revenue_wei: str


@attrs.define(frozen=True)
class HourlyCheckIns:
    hour: int
    count: int


@attrs.define(frozen=True)
class CheckInAnalytics:
    event_id: str
    time_period: str
    total_checked_in: int
    total_not_checked_in: int
    hourly: List[HourlyCheckIns] = attrs.field(factory=list)
    by_location: Dict[str, int] = attrs.field(factory=dict)
