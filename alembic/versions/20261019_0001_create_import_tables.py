"""create salons, import_batches and importable entity tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _tenant_record_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("import_batch_id", postgresql.UUID(as_uuid=True), nullable=True),
    ]


def _tenant_record_constraints() -> list[sa.Constraint]:
    return [
        sa.ForeignKeyConstraint(["tenant_id"], ["salons.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["import_batch_id"], ["import_batches.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    ]


def _create_tenant_record_indexes(table: str) -> None:
    op.create_index(f"ix_{table}_tenant_id", table, ["tenant_id"], unique=False)
    op.create_index(f"ix_{table}_import_batch_id", table, ["import_batch_id"], unique=False)


def _drop_tenant_record_indexes(table: str) -> None:
    op.drop_index(f"ix_{table}_import_batch_id", table_name=table)
    op.drop_index(f"ix_{table}_tenant_id", table_name=table)


def upgrade() -> None:
    op.create_table(
        "salons",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "timezone",
            sa.String(length=64),
            nullable=False,
            comment="IANA timezone name, e.g. Europe/Oslo",
        ),
        sa.Column(
            "is_active",
            sa.Boolean(),
            nullable=False,
            comment="Soft-disable a salon without deletion",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_salons_is_active", "salons", ["is_active"], unique=False)

    op.create_table(
        "import_batches",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "import_type",
            sa.String(length=32),
            nullable=False,
            comment="customers, services, employees, bookings",
        ),
        sa.Column("file_name", sa.String(length=255), nullable=True),
        sa.Column(
            "column_mapping",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="Source column -> target field key",
        ),
        sa.Column("total_rows", sa.Integer(), nullable=False),
        sa.Column("success_count", sa.Integer(), nullable=False),
        sa.Column("failed_count", sa.Integer(), nullable=False),
        sa.Column(
            "error_log",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="Ordered list of {row, field, error}",
        ),
        sa.Column(
            "status",
            sa.String(length=32),
            nullable=False,
            comment="pending → processing → completed | failed → rolled_back",
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["salons.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_import_batches_tenant_created_at",
        "import_batches",
        ["tenant_id", "created_at"],
        unique=False,
    )
    op.create_index("ix_import_batches_status", "import_batches", ["status"], unique=False)

    op.create_table(
        "customers",
        *_tenant_record_columns(),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "gdpr_consent",
            sa.Boolean(),
            nullable=False,
            comment="Imported customers are recorded as consented by the salon",
        ),
        *_timestamps(),
        *_tenant_record_constraints(),
    )
    _create_tenant_record_indexes("customers")
    op.create_index("ix_customers_tenant_full_name", "customers", ["tenant_id", "full_name"], unique=False)

    op.create_table(
        "services",
        *_tenant_record_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("price_cents", sa.Integer(), nullable=False, comment="Price in minor currency units"),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("prep_minutes", sa.Integer(), nullable=False),
        sa.Column("cleanup_minutes", sa.Integer(), nullable=False),
        *_timestamps(),
        *_tenant_record_constraints(),
    )
    _create_tenant_record_indexes("services")
    op.create_index("ix_services_tenant_name", "services", ["tenant_id", "name"], unique=False)

    op.create_table(
        "employees",
        *_tenant_record_columns(),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("role", sa.String(length=50), nullable=False),
        *_timestamps(),
        *_tenant_record_constraints(),
    )
    _create_tenant_record_indexes("employees")
    op.create_index("ix_employees_tenant_full_name", "employees", ["tenant_id", "full_name"], unique=False)

    op.create_table(
        "bookings",
        *_tenant_record_columns(),
        sa.Column("customer_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("service_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("employee_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            sa.String(length=32),
            nullable=False,
            comment="pending, confirmed, completed, cancelled, no-show",
        ),
        sa.Column("is_walk_in", sa.Boolean(), nullable=False),
        sa.Column("is_imported", sa.Boolean(), nullable=False),
        *_timestamps(),
        *_tenant_record_constraints(),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="SET NULL"),
    )
    _create_tenant_record_indexes("bookings")
    op.create_index("ix_bookings_tenant_start_time", "bookings", ["tenant_id", "start_time"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_bookings_tenant_start_time", table_name="bookings")
    _drop_tenant_record_indexes("bookings")
    op.drop_table("bookings")

    op.drop_index("ix_employees_tenant_full_name", table_name="employees")
    _drop_tenant_record_indexes("employees")
    op.drop_table("employees")

    op.drop_index("ix_services_tenant_name", table_name="services")
    _drop_tenant_record_indexes("services")
    op.drop_table("services")

    op.drop_index("ix_customers_tenant_full_name", table_name="customers")
    _drop_tenant_record_indexes("customers")
    op.drop_table("customers")

    op.drop_index("ix_import_batches_status", table_name="import_batches")
    op.drop_index("ix_import_batches_tenant_created_at", table_name="import_batches")
    op.drop_table("import_batches")

    op.drop_index("ix_salons_is_active", table_name="salons")
    op.drop_table("salons")
