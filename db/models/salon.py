"""
db/models/salon.py

Salon model: the tenant root. Every customer, service, employee, booking
and import batch is scoped to one salon.
"""

import uuid

from sqlalchemy import Boolean, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class Salon(Base, TimestampMixin):
    """
    Represents one salon account (tenant) of the SaaS.

    timezone is the IANA zone used when interpreting naive booking times
    from imported files.
    """

    __tablename__ = "salons"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    timezone: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default="UTC",
        comment="IANA timezone name, e.g. Europe/Oslo",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Soft-disable a salon without deletion",
    )

    __table_args__ = (
        Index("ix_salons_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Salon id={self.id} name={self.name!r}>"
