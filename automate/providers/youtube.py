import logging
from datetime import datetime, timezone

from automate.providers.base import BaseProvider, ProviderError
from automate.schemas.research import YouTubeVideo

logger = logging.getLogger(__name__)

MAX_RESULTS = 6


def format_time_ago(published: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    days = (now - published).days
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    if days < 365:
        return f"{days // 30} months ago"
    return f"{days // 365} years ago"


def format_view_count(raw) -> str:
    if not raw:
        return "N/A"
    return f"{int(raw):,} views"


def parse_video(item: dict, now: datetime | None = None) -> YouTubeVideo:
    snippet = item.get("snippet") or {}
    thumbnails = snippet.get("thumbnails") or {}
    thumbnail = (thumbnails.get("medium") or thumbnails.get("default") or {}).get("url") or ""
    published = datetime.fromisoformat(snippet["publishedAt"].replace("Z", "+00:00"))

    return YouTubeVideo(
        id=str(item["id"]),
        title=snippet.get("title") or "",
        thumbnail=thumbnail,
        channel_name=snippet.get("channelTitle") or "",
        published_at=format_time_ago(published, now),
        view_count=format_view_count((item.get("statistics") or {}).get("viewCount")),
    )


class YouTubeProvider(BaseProvider):
    """Review videos from the YouTube Data API: a search, then a details lookup."""

    PROVIDER_NAME = "YouTube"

    @property
    def configured(self) -> bool:
        return bool(self.settings.YOUTUBE_API_KEY)

    async def search_reviews(self, make: str, model: str, year: int) -> list[YouTubeVideo]:
        if not self.configured:
            raise ProviderError(self.PROVIDER_NAME, "YOUTUBE_API_KEY is not configured")
        key = self.settings.YOUTUBE_API_KEY

        search = await self._get_json(
            f"{self.settings.YOUTUBE_API_URL}/search",
            params={
                "part": "snippet",
                "q": f"{year} {make} {model} review",
                "type": "video",
                "maxResults": MAX_RESULTS,
                "key": key,
            },
        )
        with self._parsing("video search"):
            video_ids = [
                item["id"]["videoId"]
                for item in search.get("items") or []
                if (item.get("id") or {}).get("videoId")
            ]
        if not video_ids:
            logger.info(f"[YouTube] No review videos for {year} {make} {model}")
            return []

        details = await self._get_json(
            f"{self.settings.YOUTUBE_API_URL}/videos",
            params={"part": "snippet,statistics", "id": ",".join(video_ids), "key": key},
        )
        with self._parsing("video details"):
            return [parse_video(item) for item in details.get("items") or []]
