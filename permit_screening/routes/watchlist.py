"""Watchlist administration endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Query, Request

from permit_screening.models import (
    Severity,
    WatchlistCheckResponse,
    WatchlistCreateRequest,
    WatchlistEntry,
    WatchlistRemoveResponse,
    WatchlistStats,
    WatchlistUpdateRequest,
)
from permit_screening.watchlist import WatchlistService

router = APIRouter(prefix="/api/watchlist")


def _get_watchlist(request: Request) -> WatchlistService:
    """Retrieve the watchlist service from application state."""
    return request.app.state.watchlist


@router.get("", response_model=List[WatchlistEntry])
async def list_watchlist(
    request: Request,
    is_active: Optional[bool] = Query(default=None),
    flag_type: Optional[str] = Query(default=None),
    severity: Optional[Severity] = Query(default=None),
    name: Optional[str] = Query(default=None),
) -> List[WatchlistEntry]:
    """List watchlist entries, newest first.

    Filters:
      - is_active: effective activity (expired entries count as inactive)
      - flag_type: exact flag type
      - severity: exact severity
      - name: fuzzy match on the entry's full name
    """
    return _get_watchlist(request).list_entries(
        is_active=is_active,
        flag_type=flag_type,
        severity=severity,
        name=name,
    )


@router.post("", response_model=WatchlistEntry, status_code=201)
async def add_watchlist_entry(
    body: WatchlistCreateRequest,
    request: Request,
) -> WatchlistEntry:
    """Add an entry. Existing entries for the same id are left in place."""
    return _get_watchlist(request).add_to_watchlist(
        national_id=body.national_id,
        full_name=body.full_name,
        reason=body.reason,
        flag_type=body.flag_type,
        severity=body.severity,
        expires_at=body.expires_at,
        created_by=body.created_by,
    )


@router.delete("/{national_id}", response_model=WatchlistRemoveResponse)
async def remove_watchlist_entries(
    national_id: str,
    request: Request,
    flag_type: Optional[str] = Query(default=None),
) -> WatchlistRemoveResponse:
    """Soft-remove active entries for an id. Removing nothing is not an error."""
    count = _get_watchlist(request).remove_from_watchlist(national_id, flag_type)
    return WatchlistRemoveResponse(
        national_id=national_id,
        flag_type=flag_type.strip() if flag_type else None,
        deactivated=count,
    )


@router.get("/check/{national_id}", response_model=WatchlistCheckResponse)
async def check_watchlist(national_id: str, request: Request) -> WatchlistCheckResponse:
    """Whether the id has an effectively active entry, and which one."""
    entry = _get_watchlist(request).get_active_entry(national_id)
    return WatchlistCheckResponse(on_watchlist=entry is not None, entry=entry)


@router.get("/stats", response_model=WatchlistStats)
async def watchlist_stats(request: Request) -> WatchlistStats:
    return _get_watchlist(request).stats()


@router.patch("/entries/{entry_id}", response_model=WatchlistEntry)
async def update_watchlist_entry(
    entry_id: str,
    body: WatchlistUpdateRequest,
    request: Request,
) -> WatchlistEntry:
    """Update fields of one entry. Sending expires_at as null clears the expiry."""
    return _get_watchlist(request).update_entry(
        entry_id,
        full_name=body.full_name,
        reason=body.reason,
        flag_type=body.flag_type,
        severity=body.severity,
        is_active=body.is_active,
        expires_at=body.expires_at,
        clear_expiry="expires_at" in body.model_fields_set and body.expires_at is None,
    )
