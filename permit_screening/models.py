"""Pydantic models for the permit security screening engine."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken to be UTC so they compare with aware ones."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Severity(str, Enum):
    """Risk severity tier, totally ordered LOW < MEDIUM < HIGH < CRITICAL."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    # Override all four: the str mixin would otherwise compare lexically.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


class FlagType(str, Enum):
    """Well-known watchlist flag types. Institutions may use other tags."""
    FRAUD = "FRAUD"
    SECURITY_CONCERN = "SECURITY_CONCERN"
    OVERSTAY = "OVERSTAY"


class ApplicationStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    PENDING_DOCUMENTS = "PENDING_DOCUMENTS"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PERMIT_ISSUED = "PERMIT_ISSUED"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    EXITED = "EXITED"

    @property
    def is_pending(self) -> bool:
        """Submitted but not yet finalized."""
        return self in (ApplicationStatus.SUBMITTED, ApplicationStatus.UNDER_REVIEW)


class Signal(str, Enum):
    """Named screening signals, in detector evaluation order."""
    WATCHLIST_MATCH = "watchlist_match"
    DUPLICATE_APPLICATION = "duplicate_application"
    RECENT_REJECTION = "recent_rejection"
    OVERSTAY_HISTORY = "overstay_history"
    SUSPICIOUS_PATTERN = "suspicious_pattern"


class WatchlistEntry(BaseModel):
    """Identity-keyed flag record. Never hard-deleted, only deactivated."""
    id: str
    national_id: str
    full_name: str
    reason: str
    flag_type: str
    severity: Severity = Severity.MEDIUM
    is_active: bool = True
    expires_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: datetime

    @field_validator("expires_at", "created_at")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    def is_effectively_active(self, now: datetime) -> bool:
        """Active flag set and not yet past its expiry."""
        if not self.is_active:
            return False
        return self.expires_at is None or self.expires_at > now


class ApplicationRecord(BaseModel):
    """A permit application as seen by the screening engine (read-only)."""
    id: str
    national_id: str
    phone_number: str
    reference_number: str
    status: ApplicationStatus
    created_at: datetime
    rejection_date: Optional[datetime] = None
    overstay_days: Optional[int] = None

    @field_validator("created_at", "rejection_date")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class DetectorOutcome(BaseModel):
    """One triggered signal produced by a detector."""
    signal: Signal
    flag: str  # Human-readable flag appended to the result
    weight: int  # Points added to the cumulative risk score
    details: dict[str, Any] = Field(default_factory=dict)


class ScreeningDetails(BaseModel):
    """Sparse per-signal details. A field is None unless its signal fired."""
    model_config = ConfigDict(extra="forbid")

    watchlist_match: Optional[bool] = None
    duplicate_application: Optional[bool] = None
    recent_rejection: Optional[bool] = None
    overstay_history: Optional[bool] = None
    suspicious_pattern: Optional[bool] = None
    watchlist_severity: Optional[Severity] = None
    watchlist_name_similarity: Optional[int] = None
    duplicate_reference: Optional[str] = None
    overstay_days: Optional[int] = None
    shared_phone_identities: Optional[int] = None


class ScreeningResult(BaseModel):
    """Verdict of a single screening call. Owned by the caller once returned."""
    risk_score: int = Field(ge=0, le=100)
    severity: Severity
    passed: bool
    requires_supervisor_review: bool
    requires_manual_review: bool
    flags: list[str]
    details: ScreeningDetails


class ScreeningRequest(BaseModel):
    """Incoming screening request from the submission workflow."""
    national_id: str
    phone_number: str
    full_name: str
    current_application_id: Optional[str] = None


class WatchlistCreateRequest(BaseModel):
    national_id: str
    full_name: str
    reason: str
    flag_type: str
    severity: Severity = Severity.MEDIUM
    expires_at: Optional[datetime] = None
    created_by: Optional[str] = None


class WatchlistUpdateRequest(BaseModel):
    """Partial update of one entry. Only fields sent are changed."""
    full_name: Optional[str] = None
    reason: Optional[str] = None
    flag_type: Optional[str] = None
    severity: Optional[Severity] = None
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None


class WatchlistCheckResponse(BaseModel):
    on_watchlist: bool
    entry: Optional[WatchlistEntry] = None


class WatchlistRemoveResponse(BaseModel):
    national_id: str
    flag_type: Optional[str] = None
    deactivated: int


class WatchlistStats(BaseModel):
    total: int
    by_flag_type: dict[str, int]
    by_severity: dict[str, int]


class ApplicationCreateRequest(BaseModel):
    national_id: str
    phone_number: str
    reference_number: str
    status: ApplicationStatus = ApplicationStatus.SUBMITTED
    created_at: Optional[datetime] = None
    rejection_date: Optional[datetime] = None
    overstay_days: Optional[int] = None


class ScreeningConfig(BaseModel):
    """Tunable weights and thresholds for the screening detectors."""
    watchlist_weights: dict[Severity, int] = Field(
        default_factory=lambda: {
            Severity.LOW: 15,
            Severity.MEDIUM: 30,
            Severity.HIGH: 50,
            Severity.CRITICAL: 80,
        }
    )
    duplicate_weight: int = 40
    suspicious_weight: int = 30
    recent_rejection_weight: int = 25
    overstay_weight: int = 35
    rejection_lookback_days: int = 30
    shared_phone_min_identities: int = 3
    national_id_pattern: str = r"^[A-Za-z0-9-]{4,32}$"
    fuzzy_match_threshold: int = 85

    @field_validator("watchlist_weights")
    @classmethod
    def cover_every_severity(cls, v: dict[Severity, int]) -> dict[Severity, int]:
        missing = [s.value for s in Severity if s not in v]
        if missing:
            raise ValueError(f"watchlist_weights missing severities: {', '.join(missing)}")
        return v
