from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from nft_ticketing.platform.database.orm_db_setting import Base


class TicketModel(Base):
    __tablename__ = 'ticket'
    __table_args__ = (
        # NULL seat keys (general admission) never collide
        UniqueConstraint('event_id', 'seat_key', name='uq_ticket_event_seat'),
        UniqueConstraint('purchase_id', 'batch_index', name='uq_ticket_purchase_batch'),
        Index('ix_ticket_status_expiry', 'status', 'expiry_time'),
        Index('ix_ticket_type_status', 'ticket_type_id', 'status'),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    purchase_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    batch_index: Mapped[int] = mapped_column(Integer, nullable=False)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    ticket_type_id: Mapped[str] = mapped_column(String(36), nullable=False)
    session_id: Mapped[str] = mapped_column(String(64), nullable=False, default='')
    owner_address: Mapped[str] = mapped_column(String(42), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    token_id: Mapped[Optional[str]] = mapped_column(String(78), nullable=True, unique=True)
    token_uri_cid: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    transaction_hash: Mapped[str] = mapped_column(String(66), nullable=False, default='')
    qr_code_secret: Mapped[Optional[str]] = mapped_column(Text, nullable=True, index=True)
    check_in_status: Mapped[str] = mapped_column(String(20), nullable=False)
    check_in_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    check_in_location: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    check_in_scanner_id: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    expiry_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    seat_key: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    seat_section: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    seat_row: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    seat_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
