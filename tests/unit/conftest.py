"""Shared fixtures for HN Reader unit tests."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from hnreader.clients.store import ArticleStore

FEED_URL = "https://feed.test/hn-daily/index.rss"


def story(article_link: str, comment_link: str, title: str) -> str:
    """Render one digest list entry the way the upstream feed does."""
    return (
        f'<li><span class="storylink"><a href="{article_link}">{title}</a></span>'
        f'<br><span class="postlink"><a href="{comment_link}">comments</a></span></li>'
    )


def digest_feed(*items: tuple[str, str]) -> bytes:
    """Render an RSS document from (pub_date, description) pairs."""
    rendered = "".join(
        f"""
  <item>
    <title>Daily Hacker News for {pub_date}</title>
    <link>https://www.daemonology.net/hn-daily/{index}.html</link>
    <pubDate>{pub_date}</pubDate>
    <description><![CDATA[<ul>{description}</ul>]]></description>
  </item>"""
        for index, (pub_date, description) in enumerate(items)
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
  <title>Daily Hacker News</title>
  <link>https://www.daemonology.net/hn-daily/</link>
  <description>The top Hacker News stories of each day</description>{rendered}
</channel>
</rss>
""".encode()


@pytest.fixture
async def store(tmp_path: Path) -> AsyncIterator[ArticleStore]:
    """Create an opened store backed by a temporary database file."""
    article_store = ArticleStore(str(tmp_path / "db" / "articles.db"))
    await article_store.open()
    yield article_store
    await article_store.close()
