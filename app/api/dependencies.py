"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from db.repositories.errors import SalonInactiveError, SalonNotFoundError
from db.repositories.salon_repository import SalonRepository
from db.session import get_db

TENANT_HEADER = "X-Tenant-ID"


def parse_tenant_header(raw_value: str | None) -> UUID:
    """
    Parse the tenant header into a UUID or raise a 400.
    """

    value = (raw_value or "").strip()
    if not value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{TENANT_HEADER} header is required.",
        )
    try:
        return UUID(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{TENANT_HEADER} must be a UUID.",
        ) from exc


def get_tenant_id(
    x_tenant_id: str | None = Header(default=None, alias=TENANT_HEADER),
    db: Session = Depends(get_db),
) -> UUID:
    """
    Resolve the calling salon from the tenant header and check it is active.
    """

    tenant_id = parse_tenant_header(x_tenant_id)
    try:
        SalonRepository(db).ensure_salon_exists(tenant_id)
    except SalonNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except SalonInactiveError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return tenant_id
