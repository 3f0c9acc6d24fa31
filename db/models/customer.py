"""
db/models/customer.py

Salon customer records.
"""

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TenantRecordMixin


class Customer(Base, TenantRecordMixin):
    __tablename__ = "customers"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    gdpr_consent: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Imported customers are recorded as consented by the salon",
    )

    __table_args__ = (
        Index("ix_customers_tenant_full_name", "tenant_id", "full_name"),
    )
