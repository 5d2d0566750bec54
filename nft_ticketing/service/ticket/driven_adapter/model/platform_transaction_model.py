from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from nft_ticketing.platform.database.orm_db_setting import Base


class PlatformTransactionModel(Base):
    __tablename__ = 'platform_transaction'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    transaction_hash: Mapped[str] = mapped_column(String(66), nullable=False, unique=True)
    purchase_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    event_organizer_id: Mapped[str] = mapped_column(String(64), nullable=False, default='')
    buyer_address: Mapped[str] = mapped_column(String(42), nullable=False)
    amount_wei: Mapped[str] = mapped_column(String(78), nullable=False)
    platform_fee_wei: Mapped[str] = mapped_column(String(78), nullable=False)
    organizer_amount_wei: Mapped[str] = mapped_column(String(78), nullable=False)
    platform_fee_percent: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    settled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    settlement_transaction_hash: Mapped[Optional[str]] = mapped_column(String(66), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
