from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from automate.api.deps import get_insights
from automate.providers.insights import InsightsProvider
from automate.schemas.common import ErrorResponse
from automate.schemas.insights import (
    ContextRequest,
    FollowUpResponse,
    QueryRequest,
    RecommendationAnalysis,
)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/follow-up", response_model=FollowUpResponse)
async def follow_up(request: QueryRequest, insights: InsightsProvider = Depends(get_insights)):
    if not request.query:
        return JSONResponse(status_code=400, content=ErrorResponse(error="Query is required").model_dump())
    questions = await insights.generate_follow_up_questions(request.query)
    return FollowUpResponse(questions=questions)


@router.post("/recommendation", response_model=RecommendationAnalysis)
async def recommendation(request: ContextRequest, insights: InsightsProvider = Depends(get_insights)):
    if not request.context:
        return JSONResponse(status_code=400, content=ErrorResponse(error="Context is required").model_dump())
    message = await insights.generate_recommendation_summary(request.context)
    return RecommendationAnalysis(message=message)
