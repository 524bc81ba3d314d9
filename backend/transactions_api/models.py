from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from transactions_api.db import Base


DEFAULT_STATUS = "Pending"


class Transaction(Base):
    __tablename__ = "transactions"

    # Identifier from the source file; re-imports upsert on it.
    transaction_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), default="")
    email: Mapped[str] = mapped_column(String(320), default="")
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"))

    # Wall-clock time in `timezone`, stored without an offset.
    transaction_date: Mapped[datetime] = mapped_column(DateTime(timezone=False), index=True)

    # Raw "latitude,longitude" as received.
    client_location: Mapped[str] = mapped_column(String(100), default="")
    timezone: Mapped[str] = mapped_column(String(64))
    status: Mapped[str] = mapped_column(String(50), default=DEFAULT_STATUS, server_default=DEFAULT_STATUS)

    def __repr__(self) -> str:
        return (
            f"Transaction(transaction_id={self.transaction_id!r}, "
            f"transaction_date={self.transaction_date!r}, timezone={self.timezone!r})"
        )
