"""Event service read models."""

from datetime import datetime, timezone
from typing import Any, List, Optional

import attrs


@attrs.define(frozen=True)
class EventSession:
    id: str
    name: str
    contract_session_id: str
    start_time: int  # Unix seconds
    end_time: int

    @property
    def end_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.end_time, tz=timezone.utc)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'EventSession':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            contract_session_id=str(data.get('contract_session_id') or ''),
            start_time=int(data.get('start_time') or 0),
            end_time=int(data.get('end_time') or 0),
        )


@attrs.define(frozen=True)
class EventInfo:
    id: str
    name: str
    organizer_id: str = ''
    organizer_wallet_address: str = ''
    description: str = ''
    location: str = ''
    banner_url_cid: str = ''
    status: str = ''
    blockchain_event_id: str = ''
    sessions: List[EventSession] = attrs.field(factory=list)

    def find_session(self, session_id: str) -> Optional[EventSession]:
        return next((s for s in self.sessions if s.id == session_id), None)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'EventInfo':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            organizer_id=str(data.get('organizer_id') or ''),
            organizer_wallet_address=(data.get('organizer_wallet_address') or '').lower(),
            description=data.get('description') or '',
            location=data.get('location') or '',
            banner_url_cid=data.get('banner_url_cid') or '',
            status=data.get('status') or '',
            blockchain_event_id=str(data.get('blockchain_event_id') or ''),
            sessions=[EventSession.from_dict(s) for s in data.get('sessions') or []],
        )
