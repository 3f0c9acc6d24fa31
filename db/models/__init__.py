"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.booking import Booking
from db.models.customer import Customer
from db.models.employee import Employee
from db.models.import_batch import ImportBatch
from db.models.salon import Salon
from db.models.service import Service

__all__ = [
    "Booking",
    "Customer",
    "Employee",
    "ImportBatch",
    "Salon",
    "Service",
]
