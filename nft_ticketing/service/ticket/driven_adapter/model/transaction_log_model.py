from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nft_ticketing.platform.database.orm_db_setting import Base


class TransactionLogModel(Base):
    __tablename__ = 'transaction_log'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    transaction_hash: Mapped[str] = mapped_column(String(66), nullable=False, index=True)
    block_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    organizer_id: Mapped[str] = mapped_column(String(64), nullable=False, default='')
    ticket_type_id: Mapped[str] = mapped_column(String(36), nullable=False, default='')
    amount_wei: Mapped[str] = mapped_column(String(78), nullable=False)
    platform_fee_wei: Mapped[str] = mapped_column(String(78), nullable=False)
    organizer_amount_wei: Mapped[str] = mapped_column(String(78), nullable=False)
    fee_percent_at_time: Mapped[int] = mapped_column(Integer, nullable=False)
    from_address: Mapped[str] = mapped_column(String(42), nullable=False)
    to_address: Mapped[str] = mapped_column(String(42), nullable=False, default='')
    related_purchase_id: Mapped[Optional[str]] = mapped_column(
        String(36), nullable=True, unique=True
    )
    related_ticket_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    metadata_: Mapped[dict] = mapped_column('metadata', JSON, nullable=False, default=dict)
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    failure_reason: Mapped[str] = mapped_column(Text, nullable=False, default='')
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
