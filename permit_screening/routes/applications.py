"""Application record registration and lookup.

Lets the submission workflow register application records with the
in-memory store so later screenings can see them.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Request

from permit_screening.models import ApplicationCreateRequest, ApplicationRecord
from permit_screening.storage.memory import MemoryStore
from permit_screening.validators import require_text, validate_national_id

router = APIRouter(prefix="/api")


def _get_store(request: Request) -> MemoryStore:
    """Retrieve the memory store from application state."""
    return request.app.state.store


@router.post("/applications", response_model=ApplicationRecord, status_code=201)
async def register_application(
    body: ApplicationCreateRequest,
    request: Request,
) -> ApplicationRecord:
    """Register an application record and return it with its new id."""
    config = request.app.state.config
    record = ApplicationRecord(
        id=str(uuid.uuid4()),
        national_id=validate_national_id(body.national_id, config.national_id_pattern),
        phone_number=require_text(body.phone_number, "phone_number"),
        reference_number=require_text(body.reference_number, "reference_number"),
        status=body.status,
        created_at=body.created_at or datetime.now(timezone.utc),
        rejection_date=body.rejection_date,
        overstay_days=body.overstay_days,
    )
    _get_store(request).add_application(record)
    return record


@router.get("/applications/{national_id}", response_model=List[ApplicationRecord])
async def get_applications(national_id: str, request: Request) -> List[ApplicationRecord]:
    """All applications registered for a national id."""
    return _get_store(request).get_applications(national_id)
