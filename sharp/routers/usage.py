"""
FastAPI router for subscription usage tracking.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response
from sharp.dependencies import get_usage_service, require_auth
from sharp.pipelines import usage as pipelines
from sharp.schemas.usage import TrackUsageRequest
from sharp.services.usage.usage_service import UsageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/usage", tags=["usage"])


@router.post("/track")
async def track_usage(
    body: TrackUsageRequest,
    user: Annotated[dict, Depends(require_auth)],
    usage_service: Annotated[UsageService, Depends(get_usage_service)],
):
    """Record one use of a feature."""
    result = await pipelines.track_usage_pipeline(
        usage_service=usage_service,
        user=user,
        feature=body.feature,
        metadata=body.metadata,
    )
    return success_response(result)


@router.get("/summary")
async def get_usage_summary(
    user: Annotated[dict, Depends(require_auth)],
    usage_service: Annotated[UsageService, Depends(get_usage_service)],
):
    summary = await pipelines.usage_summary_pipeline(usage_service, user)
    return success_response(summary)


@router.get("/upgrade-prompt")
async def get_upgrade_prompt(
    user: Annotated[dict, Depends(require_auth)],
    usage_service: Annotated[UsageService, Depends(get_usage_service)],
):
    result = await pipelines.upgrade_prompt_pipeline(usage_service, user)
    return success_response(result)
