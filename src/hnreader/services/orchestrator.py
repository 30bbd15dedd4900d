"""Sync cycle orchestration for HN Reader."""

from dataclasses import dataclass
from datetime import UTC, datetime

from hnreader.clients.feed import FeedFetcher, FetchError
from hnreader.clients.store import ArticleStore, StorageError
from hnreader.services.extractor import extract_articles
from hnreader.services.parser import ParseError, parse_feed
from hnreader.utils.logging import get_logger

logger = get_logger(__name__)


class SyncState:
    """Freshness of the stored articles, kept in memory only."""

    def __init__(self) -> None:
        self._last_sync_time: datetime | None = None

    @property
    def last_sync_time(self) -> datetime | None:
        """Completion time of the last successful sync, None before the first."""
        return self._last_sync_time

    def mark_synced(self, when: datetime) -> None:
        self._last_sync_time = when


@dataclass
class SyncResult:
    """Outcome of one sync cycle."""

    succeeded: bool
    started_at: datetime
    finished_at: datetime
    items: int = 0
    extracted: int = 0
    new_articles: int = 0
    failed_saves: int = 0
    error: str | None = None


class SyncOrchestrator:
    """Runs one fetch, parse, extract and store pass over the digest feed."""

    def __init__(self, fetcher: FeedFetcher, store: ArticleStore, state: SyncState) -> None:
        self._fetcher = fetcher
        self._store = store
        self._state = state

    @property
    def state(self) -> SyncState:
        return self._state

    async def run(self) -> SyncResult:
        """Run a complete sync cycle.

        Fetch and parse failures end the cycle early and leave the last sync
        time untouched. A failure to save one article is logged and the
        remaining articles are still saved.

        Returns:
            SyncResult with statistics about the cycle.
        """
        started_at = datetime.now(UTC)
        logger.info("Starting feed processing")

        try:
            content = await self._fetcher.fetch()
            items = parse_feed(content)
        except FetchError as e:
            logger.error("Error fetching feed", error=e.reason)
            return self._failed(started_at, e.reason)
        except ParseError as e:
            logger.error("Error parsing feed", error=e.reason)
            return self._failed(started_at, e.reason)

        extracted = 0
        new_articles = 0
        failed_saves = 0
        for item in items:
            articles = extract_articles(item.description, item.pub_date)
            extracted += len(articles)
            for article in articles:
                try:
                    inserted = await self._store.insert(article)
                except StorageError as e:
                    logger.error("Error saving article", error=e.reason, title=article.title)
                    failed_saves += 1
                    continue
                if inserted:
                    new_articles += 1

        finished_at = datetime.now(UTC)
        self._state.mark_synced(finished_at)

        logger.info(
            "Feed processing complete",
            items=len(items),
            extracted=extracted,
            new_articles=new_articles,
            failed_saves=failed_saves,
        )

        return SyncResult(
            succeeded=True,
            started_at=started_at,
            finished_at=finished_at,
            items=len(items),
            extracted=extracted,
            new_articles=new_articles,
            failed_saves=failed_saves,
        )

    def _failed(self, started_at: datetime, reason: str) -> SyncResult:
        return SyncResult(
            succeeded=False,
            started_at=started_at,
            finished_at=datetime.now(UTC),
            error=reason,
        )
