"""
app/services/import_registry.py

Registry of supported import types.

Each ImportType owns one ImportTypeSpec bundling its target fields (kind,
required flag, required-field message, header aliases), the storage
collection its rows land in, and the insert strategy for a chunk. The row
validator, the orchestrator, the rollback manager and the column mapping
assistant all read from here.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.data_import import ImportType
from app.services.entity_inserters import (
    BookingInserter,
    BulkEntityInserter,
    EntityInserter,
    build_customer_record,
    build_employee_record,
    build_service_record,
)
from app.validators.field_coercers import FieldKind

# Coercion kind per target key; keys not listed are plain text.
FIELD_KINDS: dict[str, str] = {
    "email": FieldKind.EMAIL,
    "phone": FieldKind.PHONE,
    "duration_minutes": FieldKind.DURATION,
    "price_cents": FieldKind.MONEY,
    "start_time": FieldKind.DATETIME,
    "end_time": FieldKind.DATETIME,
}


class UnknownImportTypeError(ValueError):
    """
    Raised when a string does not name a supported import type.
    """


def field_kind(key: str) -> str:
    return FIELD_KINDS.get(key, FieldKind.TEXT)


@dataclass(frozen=True)
class TargetField:
    key: str
    label: str
    required: bool = False
    required_message: str | None = None
    aliases: tuple[str, ...] = ()

    @property
    def kind(self) -> str:
        return field_kind(self.key)


@dataclass(frozen=True)
class ImportTypeSpec:
    import_type: ImportType
    collection: str
    fields: tuple[TargetField, ...]
    inserter: EntityInserter

    @property
    def required_fields(self) -> tuple[TargetField, ...]:
        return tuple(field for field in self.fields if field.required)

    @property
    def field_keys(self) -> tuple[str, ...]:
        return tuple(field.key for field in self.fields)


_CUSTOMERS = ImportTypeSpec(
    import_type=ImportType.CUSTOMERS,
    collection="customers",
    fields=(
        TargetField(
            key="full_name",
            label="Full Name",
            required=True,
            required_message="Name is required",
            aliases=("name", "fullname", "nimi", "client", "customer", "kundenavn", "navn"),
        ),
        TargetField(key="email", label="Email", aliases=("email", "epost", "mail", "sahkoposti")),
        TargetField(
            key="phone",
            label="Phone",
            aliases=("phone", "mobile", "tel", "telefon", "puhelin", "mobil"),
        ),
        TargetField(
            key="notes",
            label="Notes",
            aliases=("notes", "comments", "muistiinpanot", "notat", "merknad"),
        ),
    ),
    inserter=BulkEntityInserter(collection="customers", build_record=build_customer_record),
)

_SERVICES = ImportTypeSpec(
    import_type=ImportType.SERVICES,
    collection="services",
    fields=(
        TargetField(
            key="name",
            label="Service Name",
            required=True,
            required_message="Service name is required",
            aliases=("name", "service", "nimi", "tjeneste", "palvelu"),
        ),
        TargetField(
            key="duration_minutes",
            label="Duration (min)",
            required=True,
            required_message="Duration is required",
            aliases=("duration", "kesto", "varighet", "minutter", "min"),
        ),
        TargetField(
            key="price_cents",
            label="Price",
            required=True,
            required_message="Price is required",
            aliases=("price", "hinta", "pris", "cost"),
        ),
        TargetField(
            key="category",
            label="Category",
            aliases=("category", "kategoria", "kategori", "type"),
        ),
    ),
    inserter=BulkEntityInserter(collection="services", build_record=build_service_record),
)

_EMPLOYEES = ImportTypeSpec(
    import_type=ImportType.EMPLOYEES,
    collection="employees",
    fields=(
        TargetField(
            key="full_name",
            label="Full Name",
            required=True,
            required_message="Name is required",
            aliases=("name", "fullname", "nimi", "staff", "ansatt", "navn"),
        ),
        TargetField(key="email", label="Email", aliases=("email", "epost", "mail")),
        TargetField(key="role", label="Role", aliases=("role", "rooli", "rolle")),
    ),
    inserter=BulkEntityInserter(collection="employees", build_record=build_employee_record),
)

_BOOKINGS = ImportTypeSpec(
    import_type=ImportType.BOOKINGS,
    collection="bookings",
    fields=(
        TargetField(
            key="start_time",
            label="Start Time",
            required=True,
            required_message="Start time is required",
            aliases=("start", "alkaa", "starttid", "begin"),
        ),
        TargetField(
            key="end_time",
            label="End Time",
            aliases=("end", "paattyy", "sluttid", "finish"),
        ),
        TargetField(
            key="customer_name",
            label="Customer",
            aliases=("customer", "client", "asiakas", "kunde"),
        ),
        TargetField(
            key="service_name",
            label="Service",
            aliases=("service", "palvelu", "tjeneste"),
        ),
        TargetField(
            key="employee_name",
            label="Employee",
            aliases=("employee", "staff", "tyontekija", "ansatt"),
        ),
        TargetField(key="status", label="Status", aliases=("status", "tila")),
    ),
    inserter=BookingInserter(),
)

IMPORT_TYPE_REGISTRY: dict[ImportType, ImportTypeSpec] = {
    spec.import_type: spec for spec in (_CUSTOMERS, _SERVICES, _EMPLOYEES, _BOOKINGS)
}


def parse_import_type(value: ImportType | str) -> ImportType:
    if isinstance(value, ImportType):
        return value
    try:
        return ImportType(str(value).strip().lower())
    except ValueError as exc:
        raise UnknownImportTypeError(f"Unknown import type: {value}") from exc


def get_import_type_spec(import_type: ImportType | str) -> ImportTypeSpec:
    return IMPORT_TYPE_REGISTRY[parse_import_type(import_type)]
