"""API v1 router that aggregates all endpoint routers."""

from fastapi import APIRouter

from petfeed_recommender.api.v1 import health, recommendations

api_router = APIRouter()

api_router.include_router(
    health.router,
    tags=["Health"],
)

api_router.include_router(
    recommendations.router,
    prefix="/recommendations",
    tags=["Recommendations"],
)
