"""
db/models/employee.py

Salon staff members.
"""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TenantRecordMixin


class Employee(Base, TenantRecordMixin):
    __tablename__ = "employees"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="staff")

    __table_args__ = (
        Index("ix_employees_tenant_full_name", "tenant_id", "full_name"),
    )
