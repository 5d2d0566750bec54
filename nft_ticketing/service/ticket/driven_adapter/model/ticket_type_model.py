from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from nft_ticketing.platform.database.orm_db_setting import Base


class TicketTypeModel(Base):
    __tablename__ = 'ticket_type'
    __table_args__ = (UniqueConstraint('event_id', 'name', name='uq_ticket_type_event_name'),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    session_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    contract_session_id: Mapped[str] = mapped_column(String(78), nullable=False, default='')
    blockchain_event_id: Mapped[str] = mapped_column(String(78), nullable=False, default='')
    blockchain_ticket_type_id: Mapped[str] = mapped_column(String(78), nullable=False, default='')
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    total_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_wei: Mapped[str] = mapped_column(String(78), nullable=False)  # uint256 as decimal text
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
