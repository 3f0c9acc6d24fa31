"""
Salon (tenant) lookups used to authorize tenant-scoped requests.
"""

from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from db.models.salon import Salon
from db.repositories.errors import SalonInactiveError, SalonNotFoundError


class SalonRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def ensure_salon_exists(self, salon_id: uuid.UUID, *, active_only: bool = True) -> Salon:
        salon = self._session.get(Salon, salon_id)
        if salon is None:
            raise SalonNotFoundError(f"Salon not found: {salon_id}")
        if active_only and not salon.is_active:
            raise SalonInactiveError(f"Salon is inactive: {salon_id}")
        return salon
