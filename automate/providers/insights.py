import json
import logging

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from automate.config import Settings
from automate.providers import prompts
from automate.providers.base import ProviderError
from automate.schemas.insights import (
    CarInsights,
    CarRecommendation,
    DealScore,
    KeySpecs,
    RecommendationResponse,
    VehicleComparison,
)
from automate.schemas.research import ForumCommunity, ForumInsights, RedditInsights, RedditQuote
from automate.schemas.vehicle import VehicleRef

logger = logging.getLogger(__name__)

MAX_FOLLOW_UP_QUESTIONS = 7
MAX_RECOMMENDATIONS = 6

FALLBACK_SUMMARY_MESSAGE = (
    "Based on what you've shared, I've found some **solid options** that match your needs. "
    "The picks below offer the best combination of **value**, **reliability**, and features "
    "for what you're looking for!"
)

FALLBACK_RECOMMENDATIONS_SUMMARY = (
    "Top picks: **Toyota RAV4 Hybrid** for reliability and **40+ MPG**, **Mazda CX-50** for "
    "premium feel, **Honda CR-V Hybrid** for rear space. Consider CPO to save $5-8k."
)

FALLBACK_EV = [
    CarRecommendation(
        name="Tesla Model Y Long Range", make="Tesla", model="Model Y", year=2024,
        price_range="$45,000-$52,000", type="EV SUV",
        key_specs=KeySpecs(range="310 miles", drivetrain="AWD", horsepower="384 hp"),
    ),
]

FALLBACK_SUV = [
    CarRecommendation(
        name="Toyota RAV4 Hybrid XLE", make="Toyota", model="RAV4", year=2024,
        price_range="$33,000-$38,000", type="Hybrid SUV",
        key_specs=KeySpecs(mpg="41 city / 38 hwy", drivetrain="AWD", seating="5 passengers"),
    ),
    CarRecommendation(
        name="Mazda CX-50 Turbo", make="Mazda", model="CX-50", year=2024,
        price_range="$38,000-$43,000", type="Compact SUV",
        key_specs=KeySpecs(mpg="24 city / 30 hwy", drivetrain="AWD", horsepower="256 hp"),
    ),
    CarRecommendation(
        name="Honda CR-V Hybrid Sport-L", make="Honda", model="CR-V", year=2024,
        price_range="$36,000-$40,000", type="Hybrid SUV",
        key_specs=KeySpecs(mpg="40 city / 34 hwy", drivetrain="AWD", seating="5 passengers"),
    ),
]

FALLBACK_QUESTIONS_VAGUE = [
    "Hey, let's figure this out! What budget are you working with? A range is totally fine.",
    "What does your typical week look like, long commute, kid drop-offs, weekend adventures?",
    "Who's usually riding with you? Just you, or fitting a crew?",
    "Are you thinking SUV, sedan, or something else?",
    "Any preference on fuel type, gas, hybrid, or going full electric?",
]

FALLBACK_QUESTIONS_PARTIAL = [
    "Nice! What budget range are we working with?",
    "What matters most to you, reliability, safety, fuel economy, or something else?",
    "Any must-haves or dealbreakers I should know about?",
]

FALLBACK_QUESTIONS_DETAILED = [
    "Love the detail! Anything else I should know before I find some options for you?",
]


def fallback_recommendations(query: str) -> RecommendationResponse:
    """Static picks used when the model is unavailable, keyed off the query wording."""
    lower = query.lower()
    wants_ev = "ev" in lower or "electric" in lower
    wants_suv = "suv" in lower or "family" in lower

    picks = []
    if wants_ev:
        picks.extend(FALLBACK_EV)
    if wants_suv or not picks:
        picks.extend(FALLBACK_SUV)

    return RecommendationResponse(
        summary=FALLBACK_RECOMMENDATIONS_SUMMARY,
        recommendations=picks[:MAX_RECOMMENDATIONS],
    )


def fallback_follow_up_questions(query: str) -> list[str]:
    words = len(query.split())
    if words <= 3:
        return list(FALLBACK_QUESTIONS_VAGUE)
    if words <= 10:
        return list(FALLBACK_QUESTIONS_PARTIAL)
    return list(FALLBACK_QUESTIONS_DETAILED)



def fallback_forum_insights(make: str, model: str) -> ForumInsights:
    return ForumInsights(
        reddit=RedditInsights(
            sentiment="positive",
            top_topics=[
                "Reliability concerns",
                "Real-world fuel economy",
                "Comparison with competitors",
                "Long-term ownership costs",
                "Common maintenance items",
            ],
            common_praises=[
                "Solid build quality and reliability",
                "Good resale value",
                "Comfortable for daily driving",
            ],
            common_complaints=[
                "Infotainment system could be more responsive",
                "Some road noise at highway speeds",
                "Dealer markups in some areas",
            ],
            sample_quotes=[
                RedditQuote(
                    text=f"Had my {model} for 2 years now, no major issues. Just regular maintenance.",
                    subreddit=f"r/{make.lower()}",
                ),
                RedditQuote(
                    text=f"The {model} is solid overall, but the gas mileage isn't quite what they advertise.",
                    subreddit="r/whatcarshouldIbuy",
                ),
                RedditQuote(
                    text=f"Between this and the competition, I chose the {model} for reliability. No regrets.",
                    subreddit="r/cars",
                ),
            ],
        ),
        forums=[
            ForumCommunity(
                name=f"{make}Nation",
                sentiment="positive",
                key_takeaways=[
                    "Most owners report excellent reliability past 100K miles",
                    "Regular maintenance is key to longevity",
                    "Holds value well compared to competitors",
                ],
            ),
            ForumCommunity(
                name="CarGurus Forums",
                sentiment="mixed",
                key_takeaways=[
                    "Mixed reviews on dealer service quality",
                    "Some owners recommend an extended warranty",
                    "Generally positive feedback on ownership experience",
                ],
            ),
        ],
    )


class InsightsProvider:
    """LLM-generated owner insights, comparisons and recommendations."""

    PROVIDER_NAME = "OpenAI"

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None):
        self.settings = settings
        if client is not None:
            self.client = client
        elif settings.OPENAI_API_KEY:
            self.client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.OPENAI_TIMEOUT_SECONDS,
            )
        else:
            logger.warning("OpenAI API key not configured")
            self.client = None

    async def _complete_json(
        self,
        system: str,
        user: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> dict:
        """Run one JSON-mode chat completion and return the decoded object."""
        if not self.client:
            raise ProviderError(self.PROVIDER_NAME, "client not initialized")

        try:
            completion = await self.client.chat.completions.create(
                model=self.settings.OPENAI_MODEL,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            logger.error(f"[OpenAI] Chat completion failed: {e}")
            raise ProviderError(self.PROVIDER_NAME, str(e)) from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise ProviderError(self.PROVIDER_NAME, "no response content")

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ProviderError(self.PROVIDER_NAME, "response was not valid JSON") from e

    async def get_car_insights(self, make: str, model: str, year: int | None = None) -> CarInsights:
        vehicle = VehicleRef(make=make, model=model, year=year).describe()
        if not year:
            vehicle += " (recent model years)"

        data = await self._complete_json(
            prompts.INSIGHTS_SYSTEM,
            prompts.INSIGHTS_USER.format(vehicle=vehicle),
        )
        try:
            return CarInsights.model_validate(data)
        except ValidationError as e:
            raise ProviderError(self.PROVIDER_NAME, f"unexpected insights shape: {e}") from e

    async def get_forum_insights(self, make: str, model: str, year: int) -> ForumInsights:
        """Owner opinions from Reddit and forums; falls back to generic insights."""
        vehicle = VehicleRef(make=make, model=model, year=year).describe()
        try:
            data = await self._complete_json(
                prompts.FORUM_SYSTEM,
                prompts.FORUM_USER.format(vehicle=vehicle),
                max_tokens=800,
            )
            return ForumInsights.model_validate(data)
        except (ProviderError, ValidationError) as e:
            logger.error(f"Error generating forum insights: {e}")
            return fallback_forum_insights(make, model)

    async def compare_vehicles(self, vehicles: list[VehicleRef]) -> VehicleComparison:
        names = " vs ".join(v.describe() for v in vehicles)
        data = await self._complete_json(
            prompts.COMPARE_SYSTEM,
            prompts.COMPARE_USER.format(vehicles=names),
        )
        try:
            return VehicleComparison.model_validate(data)
        except ValidationError as e:
            raise ProviderError(self.PROVIDER_NAME, f"unexpected comparison shape: {e}") from e

    async def score_listing(self, listing: dict) -> DealScore:
        data = await self._complete_json(
            prompts.SCORE_SYSTEM,
            prompts.SCORE_USER.format(listing=json.dumps(listing, indent=2, default=str)),
            temperature=0.2,
            max_tokens=300,
        )
        try:
            return DealScore.model_validate(data)
        except ValidationError as e:
            raise ProviderError(self.PROVIDER_NAME, f"unexpected score shape: {e}") from e

    async def get_car_recommendations(self, query: str) -> RecommendationResponse:
        """Personalized picks for a free-text request; never fails."""
        try:
            data = await self._complete_json(
                prompts.RECOMMENDATIONS_SYSTEM, query, max_tokens=2000
            )
            result = RecommendationResponse.model_validate(data)
        except (ProviderError, ValidationError) as e:
            logger.error(f"Error getting car recommendations: {e}")
            return fallback_recommendations(query)

        if not result.recommendations:
            return fallback_recommendations(query)
        return result

    async def generate_follow_up_questions(self, query: str) -> list[str]:
        try:
            data = await self._complete_json(
                prompts.FOLLOW_UP_SYSTEM, query, max_tokens=600
            )
        except ProviderError as e:
            logger.error(f"Error generating follow-up questions: {e}")
            return fallback_follow_up_questions(query)

        # Older prompt versions answered with a bare list
        questions = data if isinstance(data, list) else data.get("questions")
        if not isinstance(questions, list):
            logger.warning("[OpenAI] Follow-up response had no questions list")
            return fallback_follow_up_questions(query)
        return [str(q) for q in questions[:MAX_FOLLOW_UP_QUESTIONS]]

    async def generate_recommendation_summary(self, context: str) -> str:
        try:
            data = await self._complete_json(
                prompts.RECOMMENDATION_SUMMARY_SYSTEM, context, max_tokens=300
            )
        except ProviderError as e:
            logger.error(f"OpenAI recommendation error: {e}")
            return FALLBACK_SUMMARY_MESSAGE
        message = data.get("message") if isinstance(data, dict) else None
        return message or "I've analyzed your needs and found some great options below!"
