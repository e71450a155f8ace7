"""Screening endpoint for the application-submission workflow."""

from fastapi import APIRouter, Request

from permit_screening.models import ScreeningRequest, ScreeningResult
from permit_screening.screening.engine import ScreeningEngine

router = APIRouter(prefix="/api")


def _get_engine(request: Request) -> ScreeningEngine:
    """Retrieve the screening engine from application state."""
    return request.app.state.engine


@router.post(
    "/screening",
    response_model=ScreeningResult,
    response_model_exclude_none=True,
)
async def screen_applicant(
    screening_request: ScreeningRequest,
    request: Request,
) -> ScreeningResult:
    """Screen an applicant against every risk detector.

    Detail keys for signals that did not fire are omitted from the response.
    """
    engine = _get_engine(request)
    return engine.screen(screening_request)
