from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nft_ticketing.platform.database.orm_db_setting import Base


class PurchaseModel(Base):
    __tablename__ = 'purchase'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    ticket_type_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    wallet_address: Mapped[str] = mapped_column(String(42), nullable=False, index=True)
    selected_seats: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    purchase_details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    metadata_uris: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    transaction_hash: Mapped[Optional[str]] = mapped_column(String(66), nullable=True, unique=True)
    failure_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
