from typing import Any

from automate.schemas.common import CamelModel
from automate.schemas.vehicle import VehicleRef


class CarInsights(CamelModel):
    summary: str = ""
    pros: list[str] = []
    cons: list[str] = []
    common_issues: list[str] = []
    best_for: list[str] = []
    not_ideal_for: list[str] = []
    competitor_comparison: str = ""
    buying_tips: list[str] = []
    owner_sentiment: str = "mixed"  # very_positive, positive, mixed, negative
    reliability_score: float | None = None  # 1-10


class VehicleRanking(CamelModel):
    vehicle: str
    score: float
    best_for: str = ""


class VehicleComparison(CamelModel):
    comparison: str = ""
    rankings: list[VehicleRanking] = []
    verdict: str = ""


class CompareRequest(CamelModel):
    vehicles: list[VehicleRef] | None = None


class DealScore(CamelModel):
    score: int
    verdict: str
    reasons: list[str] = []


class ScoreRequest(CamelModel):
    listing: dict[str, Any] | None = None


class KeySpecs(CamelModel):
    mpg: str | None = None
    range: str | None = None
    drivetrain: str = ""
    seating: str | None = None
    horsepower: str | None = None


class CarRecommendation(CamelModel):
    name: str
    make: str
    model: str
    year: int
    price_range: str = ""
    type: str = ""
    key_specs: KeySpecs = KeySpecs()


class RecommendationResponse(CamelModel):
    summary: str
    recommendations: list[CarRecommendation] = []


class QueryRequest(CamelModel):
    query: str | None = None


class ContextRequest(CamelModel):
    context: str | None = None


class FollowUpResponse(CamelModel):
    questions: list[str] = []


class RecommendationAnalysis(CamelModel):
    message: str
