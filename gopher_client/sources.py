"""Per-source job helpers.

All of them follow one contract: build the typed arguments, `submit_job`, and
(for the non-async variants) wait for completion with the client's poller.
`timeout` defaults to the client's configured job timeout.
"""

from typing import TYPE_CHECKING, Any, List, Optional

from .args import (
    LinkedInProfileArguments,
    LinkedInScraperMode,
    RedditArguments,
    RedditOperation,
    TikTokSearchArguments,
    TikTokTranscriptionArguments,
    TikTokTrendingArguments,
    TwitterSearchArguments,
    WebScraperArguments,
)
from .context import RunContext
from .types import Document, JobType, ResultResponse

if TYPE_CHECKING:  # pragma: no cover
    from .client import GopherClient


class SourcesMixin:
    # --- Twitter ---
    def search_twitter_with_args_async(
        self: "GopherClient", args: TwitterSearchArguments
    ) -> ResultResponse:
        return self.submit_job(JobType.TWITTER_SEARCH, args)

    def search_twitter_async(self: "GopherClient", query: str) -> ResultResponse:
        return self.search_twitter_with_args_async(TwitterSearchArguments(query=query))

    def search_twitter_with_args(
        self: "GopherClient",
        args: TwitterSearchArguments,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        return self.run_job(JobType.TWITTER_SEARCH, args, timeout=timeout, ctx=ctx)

    def search_twitter(
        self: "GopherClient",
        query: str,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        return self.search_twitter_with_args(
            TwitterSearchArguments(query=query), timeout=timeout, ctx=ctx
        )

    # --- Web ---
    def scrape_web_async(self: "GopherClient", url: str) -> ResultResponse:
        return self.submit_job(JobType.WEB_SCRAPE, WebScraperArguments(url=url))

    def scrape_web_with_args(
        self: "GopherClient",
        args: WebScraperArguments,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        return self.run_job(JobType.WEB_SCRAPE, args, timeout=timeout, ctx=ctx)

    def scrape_web(
        self: "GopherClient",
        url: str,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        return self.scrape_web_with_args(WebScraperArguments(url=url), timeout=timeout, ctx=ctx)

    # --- Reddit ---
    def submit_reddit(self: "GopherClient", args: RedditArguments) -> ResultResponse:
        return self.submit_job(JobType.REDDIT_SEARCH, args)

    def run_reddit(
        self: "GopherClient",
        args: RedditArguments,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        return self.run_job(JobType.REDDIT_SEARCH, args, timeout=timeout, ctx=ctx)

    def reddit_scrape_url(self: "GopherClient", url: str, max_items: int = 10, **kw: Any) -> List[Document]:
        args = RedditArguments(type=RedditOperation.SCRAPE_URLS, urls=[url], max_items=max_items)
        return self.run_reddit(args, **kw)

    def reddit_search_posts(self: "GopherClient", query: str, max_items: int = 10, **kw: Any) -> List[Document]:
        args = RedditArguments(type=RedditOperation.SEARCH_POSTS, queries=[query], max_items=max_items)
        return self.run_reddit(args, **kw)

    def reddit_search_users(self: "GopherClient", query: str, max_items: int = 10, **kw: Any) -> List[Document]:
        args = RedditArguments(type=RedditOperation.SEARCH_USERS, queries=[query], max_items=max_items)
        return self.run_reddit(args, **kw)

    def reddit_search_communities(
        self: "GopherClient", query: str, max_items: int = 10, **kw: Any
    ) -> List[Document]:
        args = RedditArguments(
            type=RedditOperation.SEARCH_COMMUNITIES, queries=[query], max_items=max_items
        )
        return self.run_reddit(args, **kw)

    # --- LinkedIn ---
    def submit_linkedin(self: "GopherClient", args: LinkedInProfileArguments) -> ResultResponse:
        return self.submit_job(JobType.LINKEDIN_SEARCH, args)

    def search_linkedin(
        self: "GopherClient",
        query: str,
        mode: LinkedInScraperMode = LinkedInScraperMode.SHORT,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        args = LinkedInProfileArguments(query=query, scraper_mode=mode)
        return self.run_job(JobType.LINKEDIN_SEARCH, args, timeout=timeout, ctx=ctx)

    # --- TikTok ---
    def transcribe_tiktok_async(self: "GopherClient", video_url: str) -> ResultResponse:
        return self.submit_job(
            JobType.TIKTOK_TRANSCRIPTION, TikTokTranscriptionArguments(video_url=video_url)
        )

    def transcribe_tiktok(
        self: "GopherClient",
        video_url: str,
        language: Optional[str] = None,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        args = TikTokTranscriptionArguments(video_url=video_url, language=language)
        return self.run_job(JobType.TIKTOK_TRANSCRIPTION, args, timeout=timeout, ctx=ctx)

    def search_tiktok_async(self: "GopherClient", query: str) -> ResultResponse:
        return self.submit_job(JobType.TIKTOK_SEARCH, TikTokSearchArguments(search=[query]))

    def search_tiktok(
        self: "GopherClient",
        query: str,
        max_items: int = 10,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        args = TikTokSearchArguments(search=[query], max_items=max_items)
        return self.run_job(JobType.TIKTOK_SEARCH, args, timeout=timeout, ctx=ctx)

    def search_tiktok_trending_async(self: "GopherClient", sort_by: str = "vv") -> ResultResponse:
        return self.submit_job(JobType.TIKTOK_TRENDING, TikTokTrendingArguments(sort_by=sort_by))

    def search_tiktok_trending(
        self: "GopherClient",
        args: Optional[TikTokTrendingArguments] = None,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        return self.run_job(
            JobType.TIKTOK_TRENDING, args or TikTokTrendingArguments(), timeout=timeout, ctx=ctx
        )
