"""Permit Application Security Screening API.

Risk screening for government permit applications. Combines watchlist
membership, duplicate submissions, rejection history, overstay history
and shared phone numbers into one bounded risk score and a review
routing decision.

Run with:
    python3 -m uvicorn permit_screening.main:app --host 0.0.0.0 --port 8000
"""

import json
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from permit_screening.errors import EntryNotFound, InvalidInput, StoreUnavailable
from permit_screening.log import get_logger
from permit_screening.models import ScreeningConfig, Severity
from permit_screening.routes import applications, rules, screening, watchlist
from permit_screening.screening.engine import ScreeningEngine
from permit_screening.settings import get_settings
from permit_screening.storage.memory import MemoryStore
from permit_screening.watchlist import WatchlistService

logger = get_logger(__name__)

app = FastAPI(
    title="Permit Application Security Screening API",
    description=(
        "Risk screening for permit applications. Checks the internal "
        "watchlist, duplicate and recently rejected applications, overstay "
        "history, and phone numbers shared across identities."
    ),
    version="1.0.0",
)


@app.on_event("startup")
async def startup() -> None:
    """Load configuration and seed data, and initialize the engine."""
    data_dir = get_settings().data_dir

    # Load tunable weights and thresholds (or use defaults)
    config_path = data_dir / "screening_config.json"
    if config_path.exists():
        with open(config_path, "r") as f:
            config = ScreeningConfig(**json.load(f))
    else:
        config = ScreeningConfig()

    store = MemoryStore()
    engine = ScreeningEngine(store=store, config=config)
    watchlist_service = WatchlistService(store=store, config=config)

    # Seed the watchlist with reference entries if provided
    seed_path = data_dir / "watchlist_seed.json"
    if seed_path.exists():
        with open(seed_path, "r") as f:
            for item in json.load(f):
                watchlist_service.add_to_watchlist(
                    national_id=item["national_id"],
                    full_name=item["full_name"],
                    reason=item["reason"],
                    flag_type=item["flag_type"],
                    severity=Severity(item.get("severity", "MEDIUM")),
                    created_by=item.get("created_by"),
                )

    # Attach to app state for dependency injection in routes
    app.state.engine = engine
    app.state.watchlist = watchlist_service
    app.state.store = store
    app.state.config = config
    logger.info("startup.complete", data_dir=str(data_dir))


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(EntryNotFound)
async def entry_not_found_handler(request: Request, exc: EntryNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    logger.error("store.unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=503,
        content={"detail": "Record store unavailable; screening could not be completed"},
    )


# Mount all API routers
app.include_router(screening.router)
app.include_router(watchlist.router)
app.include_router(applications.router)
app.include_router(rules.router)


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy"}
