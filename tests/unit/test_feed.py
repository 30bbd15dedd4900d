"""Unit tests for feed fetching and parsing."""

import httpx
import pytest
import respx
from conftest import FEED_URL, digest_feed, story
from httpx import Response

from hnreader.clients.feed import FeedFetcher, FetchError
from hnreader.services.parser import ParseError, parse_feed


class TestFeedFetcher:
    """Tests for FeedFetcher."""

    @pytest.fixture
    def fetcher(self) -> FeedFetcher:
        """Create a test fetcher."""
        return FeedFetcher(FEED_URL, timeout=5.0)

    @respx.mock
    async def test_fetch_success(self, fetcher: FeedFetcher) -> None:
        """Should return the raw response body."""
        respx.get(FEED_URL).mock(return_value=Response(200, content=b"<rss/>"))

        content = await fetcher.fetch()

        assert content == b"<rss/>"
        await fetcher.close()

    @respx.mock
    async def test_fetch_404_raises_fetch_error(self, fetcher: FeedFetcher) -> None:
        """Should raise FetchError carrying the status code."""
        respx.get(FEED_URL).mock(return_value=Response(404))

        with pytest.raises(FetchError, match="HTTP 404"):
            await fetcher.fetch()
        await fetcher.close()

    @respx.mock
    async def test_fetch_500_raises_fetch_error(self, fetcher: FeedFetcher) -> None:
        """Should raise FetchError on server errors."""
        respx.get(FEED_URL).mock(return_value=Response(503))

        with pytest.raises(FetchError, match="HTTP 503"):
            await fetcher.fetch()
        await fetcher.close()

    @respx.mock
    async def test_fetch_timeout_raises_fetch_error(self, fetcher: FeedFetcher) -> None:
        """Should raise FetchError on timeout."""
        respx.get(FEED_URL).mock(side_effect=httpx.TimeoutException("timeout"))

        with pytest.raises(FetchError, match="timeout"):
            await fetcher.fetch()
        await fetcher.close()

    @respx.mock
    async def test_fetch_connection_error_keeps_cause(self, fetcher: FeedFetcher) -> None:
        """Should wrap transport errors and chain the original exception."""
        respx.get(FEED_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(FetchError, match="request error") as exc_info:
            await fetcher.fetch()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        await fetcher.close()


class TestParseFeed:
    """Tests for parse_feed."""

    def test_parses_items(self) -> None:
        """Should decode title, link, publish date and description of each item."""
        description = story("https://example.com/a", "https://news.test/a", "Story A")
        content = digest_feed(
            ("Tue, 16 Jan 2024 04:00:00 +0000", description),
            ("Wed, 17 Jan 2024 04:00:00 +0000", ""),
        )

        items = parse_feed(content)

        assert len(items) == 2
        assert items[0].title == "Daily Hacker News for Tue, 16 Jan 2024 04:00:00 +0000"
        assert items[0].link == "https://www.daemonology.net/hn-daily/0.html"
        assert items[0].pub_date == "Tue, 16 Jan 2024 04:00:00 +0000"
        assert items[1].pub_date == "Wed, 17 Jan 2024 04:00:00 +0000"

    def test_description_markup_is_untouched(self) -> None:
        """Should hand the description markup over exactly as published."""
        description = story("https://example.com/a", "https://news.test/a", "Story A")
        content = digest_feed(("Tue, 16 Jan 2024 04:00:00 +0000", description))

        items = parse_feed(content)

        assert '<span class="storylink"><a href="https://example.com/a">' in items[0].description
        assert '<span class="postlink"><a href="https://news.test/a">' in items[0].description

    def test_empty_channel(self) -> None:
        """Should return no items for a feed without items."""
        assert parse_feed(digest_feed()) == []

    def test_malformed_envelope_raises(self) -> None:
        """Should raise ParseError instead of recovering partially."""
        content = b'<?xml version="1.0"?><rss version="2.0"><channel><item><title>x</title>'

        with pytest.raises(ParseError):
            parse_feed(content)

    def test_non_feed_document_raises(self) -> None:
        """Should raise ParseError for content that is not a feed."""
        with pytest.raises(ParseError):
            parse_feed(b"this is not xml")
