from typing import Literal

from automate.schemas.common import CamelModel

Sentiment = Literal["positive", "mixed", "negative"]


class YouTubeVideo(CamelModel):
    id: str
    title: str = ""
    thumbnail: str = ""
    channel_name: str = ""
    published_at: str = ""  # relative, e.g. "3 months ago"
    view_count: str = "N/A"


class YouTubeVideosResponse(CamelModel):
    videos: list[YouTubeVideo]


class RedditQuote(CamelModel):
    text: str
    subreddit: str = ""


class RedditInsights(CamelModel):
    sentiment: Sentiment = "mixed"
    top_topics: list[str] = []
    common_praises: list[str] = []
    common_complaints: list[str] = []
    sample_quotes: list[RedditQuote] = []


class ForumCommunity(CamelModel):
    name: str
    sentiment: Sentiment = "mixed"
    key_takeaways: list[str] = []


class ForumInsights(CamelModel):
    reddit: RedditInsights
    forums: list[ForumCommunity] = []
