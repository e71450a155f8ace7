"""Core screening orchestrator.

Runs all 5 detectors in a fixed order:
  1. Watchlist match
  2. Duplicate application (plus pending-duplicate suspicious pattern)
  3. Recent rejection
  4. Overstay history
  5. Shared phone number

The detectors are independent read-only queries. Their outcomes are
aggregated in that order, so the flag list is stable for a given store
state. The engine does not persist the result and does not catch store
errors: a failing store fails the whole screening.
"""

from datetime import datetime, timezone
from typing import Optional

from permit_screening.log import get_logger
from permit_screening.models import ScreeningConfig, ScreeningRequest, ScreeningResult
from permit_screening.screening.rules.duplicate import check_duplicate
from permit_screening.screening.rules.overstay import check_overstay
from permit_screening.screening.rules.rejection import check_recent_rejection
from permit_screening.screening.rules.suspicious import check_shared_phone
from permit_screening.screening.rules.watchlist import check_watchlist_match
from permit_screening.screening.scorer import aggregate_results
from permit_screening.storage.base import RecordStore
from permit_screening.validators import validate_national_id

logger = get_logger(__name__)


class ScreeningEngine:
    """Orchestrates applicant screening through all risk detectors."""

    def __init__(self, store: RecordStore, config: ScreeningConfig) -> None:
        self.store = store
        self.config = config

    def run_security_screening(
        self,
        national_id: str,
        phone_number: str,
        full_name: str,
        current_application_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ScreeningResult:
        """Screen one applicant and return the aggregated verdict.

        Raises InvalidInput for a blank or malformed national id before any
        store query. Any exception raised by the store propagates as is.
        """
        national_id = validate_national_id(national_id, self.config.national_id_pattern)
        now = now or datetime.now(timezone.utc)
        config = self.config

        outcomes = [
            # 1. Watchlist -- severity-keyed weight
            *check_watchlist_match(
                national_id=national_id,
                full_name=full_name,
                store=self.store,
                now=now,
                weights=config.watchlist_weights,
            ),
            # 2. Duplicate -- excludes the application being screened
            *check_duplicate(
                national_id=national_id,
                store=self.store,
                current_application_id=current_application_id,
                duplicate_weight=config.duplicate_weight,
                suspicious_weight=config.suspicious_weight,
            ),
            # 3. Recent rejection -- lookback window
            *check_recent_rejection(
                national_id=national_id,
                store=self.store,
                now=now,
                lookback_days=config.rejection_lookback_days,
                weight=config.recent_rejection_weight,
            ),
            # 4. Overstay history -- fixed weight
            *check_overstay(
                national_id=national_id,
                store=self.store,
                weight=config.overstay_weight,
            ),
            # 5. Shared phone -- distinct identities on one number
            *check_shared_phone(
                phone_number=phone_number,
                store=self.store,
                min_identities=config.shared_phone_min_identities,
                weight=config.suspicious_weight,
            ),
        ]

        result = aggregate_results(outcomes)

        logger.info(
            "screening.completed",
            national_id=national_id,
            current_application_id=current_application_id,
            risk_score=result.risk_score,
            severity=result.severity.value,
            passed=result.passed,
            flag_count=len(result.flags),
        )
        return result

    def screen(self, request: ScreeningRequest) -> ScreeningResult:
        """Screen a request model from the HTTP layer."""
        return self.run_security_screening(
            national_id=request.national_id,
            phone_number=request.phone_number,
            full_name=request.full_name,
            current_application_id=request.current_application_id,
        )
