"""
db/models/service.py

Bookable salon services (haircut, colouring, ...).
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TenantRecordMixin


class Service(Base, TenantRecordMixin):
    __tablename__ = "services"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    price_cents: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Price in minor currency units",
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="other")
    prep_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cleanup_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_services_tenant_name", "tenant_id", "name"),
    )
