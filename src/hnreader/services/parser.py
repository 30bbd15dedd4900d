"""RSS envelope parsing for the digest feed."""

from dataclasses import dataclass

import feedparser

from hnreader.utils.logging import get_logger

logger = get_logger(__name__)

# bozo exceptions that do not indicate a malformed document
BENIGN_BOZO_EXCEPTIONS = (
    feedparser.CharacterEncodingOverride,
    feedparser.NonXMLContentType,
)


class ParseError(Exception):
    """Raised when the feed document cannot be decoded."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


@dataclass
class FeedItem:
    """A single channel item of the digest feed."""

    title: str
    link: str
    pub_date: str
    description: str


def parse_feed(content: bytes) -> list[FeedItem]:
    """Decode a feed document into its channel items.

    The description markup is passed through untouched: sanitizing and
    relative URI resolution are disabled so entry extraction sees the
    markup exactly as published.

    Args:
        content: Raw feed bytes.

    Returns:
        The channel items in document order.

    Raises:
        ParseError: If the document is malformed or is not a feed.
    """
    parsed = feedparser.parse(
        content,
        sanitize_html=False,
        resolve_relative_uris=False,
    )

    if parsed.bozo and not isinstance(parsed.bozo_exception, BENIGN_BOZO_EXCEPTIONS):
        raise ParseError(f"malformed feed: {parsed.bozo_exception}")

    if not parsed.version:
        raise ParseError("document is not an RSS or Atom feed")

    items = [
        FeedItem(
            title=entry.get("title", ""),
            link=entry.get("link", ""),
            pub_date=entry.get("published", ""),
            description=entry.get("summary", ""),
        )
        for entry in parsed.entries
    ]

    logger.info("Feed parsed", version=parsed.version, items=len(items))
    return items
