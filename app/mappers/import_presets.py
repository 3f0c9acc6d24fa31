"""
app/mappers/import_presets.py

Column mapping presets for exports from other booking platforms.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from app.domain.data_import import ImportType


@dataclass(frozen=True)
class ImportPreset:
    id: str
    name: str
    import_type: ImportType
    mappings: Mapping[str, str] = field(default_factory=dict)


IMPORT_PRESETS: tuple[ImportPreset, ...] = (
    # Timma (Finnish column names)
    ImportPreset(
        id="timma-customers",
        name="Timma",
        import_type=ImportType.CUSTOMERS,
        mappings={
            "Nimi": "full_name",
            "Sähköposti": "email",
            "Puhelin": "phone",
            "Muistiinpanot": "notes",
        },
    ),
    ImportPreset(
        id="timma-services",
        name="Timma",
        import_type=ImportType.SERVICES,
        mappings={
            "Nimi": "name",
            "Kesto (min)": "duration_minutes",
            "Hinta": "price_cents",
            "Kategoria": "category",
        },
    ),
    ImportPreset(
        id="timma-employees",
        name="Timma",
        import_type=ImportType.EMPLOYEES,
        mappings={
            "Nimi": "full_name",
            "Sähköposti": "email",
            "Rooli": "role",
        },
    ),
    ImportPreset(
        id="timma-bookings",
        name="Timma",
        import_type=ImportType.BOOKINGS,
        mappings={
            "Alkaa": "start_time",
            "Päättyy": "end_time",
            "Asiakas": "customer_name",
            "Palvelu": "service_name",
            "Työntekijä": "employee_name",
            "Tila": "status",
        },
    ),
    # Fresha
    ImportPreset(
        id="fresha-customers",
        name="Fresha",
        import_type=ImportType.CUSTOMERS,
        mappings={
            "Client Name": "full_name",
            "Email": "email",
            "Mobile": "phone",
            "Notes": "notes",
        },
    ),
    ImportPreset(
        id="fresha-services",
        name="Fresha",
        import_type=ImportType.SERVICES,
        mappings={
            "Service Name": "name",
            "Duration": "duration_minutes",
            "Price": "price_cents",
            "Category": "category",
        },
    ),
    ImportPreset(
        id="fresha-employees",
        name="Fresha",
        import_type=ImportType.EMPLOYEES,
        mappings={
            "Staff Name": "full_name",
            "Email": "email",
            "Role": "role",
        },
    ),
    ImportPreset(
        id="fresha-bookings",
        name="Fresha",
        import_type=ImportType.BOOKINGS,
        mappings={
            "Start": "start_time",
            "End": "end_time",
            "Client": "customer_name",
            "Service": "service_name",
            "Staff": "employee_name",
            "Status": "status",
        },
    ),
    # Setmore
    ImportPreset(
        id="setmore-customers",
        name="Setmore",
        import_type=ImportType.CUSTOMERS,
        mappings={
            "Customer Name": "full_name",
            "Email Address": "email",
            "Phone Number": "phone",
            "Notes": "notes",
        },
    ),
    ImportPreset(
        id="setmore-services",
        name="Setmore",
        import_type=ImportType.SERVICES,
        mappings={
            "Service Name": "name",
            "Duration (mins)": "duration_minutes",
            "Price": "price_cents",
            "Category": "category",
        },
    ),
    ImportPreset(
        id="setmore-employees",
        name="Setmore",
        import_type=ImportType.EMPLOYEES,
        mappings={
            "Staff Name": "full_name",
            "Email": "email",
            "Role": "role",
        },
    ),
    ImportPreset(
        id="setmore-bookings",
        name="Setmore",
        import_type=ImportType.BOOKINGS,
        mappings={
            "Start Time": "start_time",
            "End Time": "end_time",
            "Customer": "customer_name",
            "Service": "service_name",
            "Staff Member": "employee_name",
            "Status": "status",
        },
    ),
)
