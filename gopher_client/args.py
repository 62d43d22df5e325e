"""Typed argument payloads for each job type.

Each model serializes (with unset optionals dropped) into the `args` field of a
JobRequest. Defaults mirror what the backend applies when a field is omitted.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class TwitterSearchArguments(BaseModel):
    query: str = ""
    max_results: int = 10
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    next_cursor: Optional[str] = None


class WebScraperArguments(BaseModel):
    url: str = ""
    max_depth: int = 0
    max_pages: int = 1


class RedditOperation(str, Enum):
    SCRAPE_URLS = "scrapeurls"
    SEARCH_POSTS = "searchposts"
    SEARCH_USERS = "searchusers"
    SEARCH_COMMUNITIES = "searchcommunities"


class RedditArguments(BaseModel):
    type: RedditOperation = RedditOperation.SEARCH_POSTS
    queries: List[str] = Field(default_factory=list)
    urls: List[str] = Field(default_factory=list)
    max_items: int = 10
    sort: Optional[str] = None


class LinkedInScraperMode(str, Enum):
    SHORT = "Short"
    FULL = "Full"
    FULL_EMAIL = "Full + email search"


class LinkedInProfileArguments(BaseModel):
    query: str = ""
    scraper_mode: LinkedInScraperMode = LinkedInScraperMode.SHORT
    max_items: int = 10


class TikTokTranscriptionArguments(BaseModel):
    video_url: str = ""
    language: Optional[str] = None


class TikTokSearchArguments(BaseModel):
    search: List[str] = Field(default_factory=list)
    max_items: int = 10


class TikTokTrendingArguments(BaseModel):
    sort_by: str = "vv"
    country_code: str = "US"
    period: str = "7"
    max_items: int = 10


__all__ = [
    "TwitterSearchArguments",
    "WebScraperArguments",
    "RedditOperation",
    "RedditArguments",
    "LinkedInScraperMode",
    "LinkedInProfileArguments",
    "TikTokTranscriptionArguments",
    "TikTokSearchArguments",
    "TikTokTrendingArguments",
]
