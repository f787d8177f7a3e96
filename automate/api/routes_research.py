import logging

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from automate.api.deps import get_insights, get_youtube
from automate.providers.base import ProviderError
from automate.providers.insights import InsightsProvider
from automate.providers.youtube import YouTubeProvider
from automate.schemas.common import ErrorResponse
from automate.schemas.research import ForumInsights, YouTubeVideosResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/research", tags=["research"])


@router.get("/youtube/{make}/{model}/{year}", response_model=YouTubeVideosResponse)
async def get_youtube_videos(
    make: str,
    model: str,
    year: int = Path(gt=0),
    youtube: YouTubeProvider = Depends(get_youtube),
):
    if not youtube.configured:
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="YOUTUBE_API_KEY is not configured on the backend.").model_dump(),
        )
    try:
        videos = await youtube.search_reviews(make, model, year)
    except ProviderError as e:
        logger.error(f"YouTube fetch error: {e}")
        return JSONResponse(
            status_code=502,
            content={"error": "Failed to fetch YouTube videos", "detail": str(e)},
        )
    if not videos:
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(error="No videos found for this query.").model_dump(),
        )
    return YouTubeVideosResponse(videos=videos)


@router.get("/forums/{make}/{model}/{year}", response_model=ForumInsights)
async def get_forum_insights(
    make: str,
    model: str,
    year: int = Path(gt=0),
    insights: InsightsProvider = Depends(get_insights),
):
    return await insights.get_forum_insights(make, model, year)
