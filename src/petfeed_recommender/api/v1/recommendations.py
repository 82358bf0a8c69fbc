"""Recommendation API endpoints."""

import time
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from petfeed_recommender.api.deps import (
    get_current_user_id,
    get_pipeline,
    get_preference_store,
)
from petfeed_recommender.exceptions import (
    InvalidCategoryError,
    RecommendationUnavailableError,
    UpstreamLoadError,
)
from petfeed_recommender.models import Category, RecommendationRequest
from petfeed_recommender.services.pipeline import RecommendationPipeline
from petfeed_recommender.services.preferences import PreferenceStore

logger = structlog.get_logger()

router = APIRouter()

INVALID_TYPE_DETAIL = 'Invalid type; must be "pets" or "articles"'


class RecommendationResponse(BaseModel):
    """Ordered recommended item ids, best match first."""

    recommendations: list[str]
    type: str
    took_ms: float = Field(..., description="Server-side processing time")


@router.get("", response_model=RecommendationResponse)
async def get_recommendations(
    type: Annotated[
        str | None, Query(description='Item category: "pets" or "articles"')
    ] = None,
    hint: Annotated[
        list[str] | None,
        Query(description="Optional preference hints overriding the stored profile"),
    ] = None,
    user_id: str = Depends(get_current_user_id),
    preferences: PreferenceStore = Depends(get_preference_store),
    pipeline: RecommendationPipeline = Depends(get_pipeline),
) -> RecommendationResponse:
    """
    Get the closest items of a category for the authenticated user.

    **Algorithm:**
    1. Load the user's stored preference hints
    2. Resolve the category's embedding pool (cached for 5 minutes)
    3. Embed a prompt built from the category and hints
    4. Return the top 5 items by cosine similarity
    """
    t0 = time.perf_counter()

    try:
        category = Category.parse(type)
    except InvalidCategoryError:
        raise HTTPException(status_code=400, detail=INVALID_TYPE_DETAIL) from None

    try:
        user_prefs = await preferences.get_preferences(user_id)
        logger.debug("Loaded user preferences", user_id=user_id, preferences=user_prefs)
        result = await pipeline.recommend(
            RecommendationRequest(category=category.value, preference_hints=hint),
            user_prefs,
        )
    except (UpstreamLoadError, RecommendationUnavailableError):
        raise HTTPException(status_code=500, detail="Internal server error") from None

    took_ms = round((time.perf_counter() - t0) * 1000, 2)
    logger.info(
        "Recommendations served",
        user_id=user_id,
        type=category.value,
        recommendations=result.ids,
        took_ms=took_ms,
    )
    return RecommendationResponse(
        recommendations=result.ids,
        type=category.value,
        took_ms=took_ms,
    )
