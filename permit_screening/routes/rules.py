"""Screening configuration endpoints for reading and updating weights."""

from fastapi import APIRouter, Request

from permit_screening.log import get_logger
from permit_screening.models import ScreeningConfig

router = APIRouter(prefix="/api")
logger = get_logger(__name__)


@router.get("/rules", response_model=ScreeningConfig)
async def get_rules(request: Request) -> ScreeningConfig:
    """Return the current screening configuration."""
    return request.app.state.config


@router.put("/rules", response_model=ScreeningConfig)
async def update_rules(
    new_config: ScreeningConfig,
    request: Request,
) -> ScreeningConfig:
    """Replace the screening configuration.

    Updates the app-level config and the references held by the engine and
    the watchlist service so the next call uses the new values.
    """
    request.app.state.config = new_config
    request.app.state.engine.config = new_config
    request.app.state.watchlist.config = new_config
    logger.info("rules.updated", **new_config.model_dump(mode="json", exclude={"watchlist_weights"}))
    return new_config
