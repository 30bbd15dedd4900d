"""Entry extraction from digest item descriptions.

Each digest item carries an HTML list of stories in its description. Every
story looks like::

    <li><span class="storylink"><a href="ARTICLE">TITLE</a></span>
    <span class="postlink"><a href="COMMENTS">comments</a></span></li>

Entries are located by marker substrings rather than by parsing the markup.
A list segment that does not contain all three fields is dropped without
error, so a change in the upstream markup yields no articles instead of
failing the sync.
"""

from hnreader.models import Article

LIST_ITEM_DELIMITER = "<li>"
STORY_MARKER = "storylink"
STORY_LINK_PREFIX = '<span class="storylink"><a href="'
COMMENT_LINK_PREFIX = '<span class="postlink"><a href="'
TAG_END = '">'
ANCHOR_CLOSE = "</a>"


def extract_articles(description: str, date: str) -> list[Article]:
    """Extract the stories listed in one digest item.

    Args:
        description: The item's description markup.
        date: The item's publish date, copied onto every article.

    Returns:
        Articles in the order they appear; empty if nothing matched.
    """
    articles = []

    for segment in description.split(LIST_ITEM_DELIMITER):
        if STORY_MARKER not in segment:
            continue

        article_link, title = _extract_story(segment)
        comment_link = _extract_href(segment, COMMENT_LINK_PREFIX)

        if article_link and comment_link and title:
            articles.append(
                Article(
                    date=date,
                    article_link=article_link,
                    comment_link=comment_link,
                    title=title,
                )
            )

    return articles


def _extract_href(segment: str, prefix: str) -> str:
    """Return the URL following ``prefix`` up to the next double quote."""
    idx = segment.find(prefix)
    if idx == -1:
        return ""
    start = idx + len(prefix)
    end = segment.find('"', start)
    if end == -1:
        return ""
    return segment[start:end]


def _extract_story(segment: str) -> tuple[str, str]:
    """Return the story URL and the anchor text that follows it."""
    idx = segment.find(STORY_LINK_PREFIX)
    if idx == -1:
        return "", ""

    start = idx + len(STORY_LINK_PREFIX)
    # offset of the closing quote relative to start, -1 when missing
    end = segment[start:].find('"')
    link = segment[start : start + end] if end != -1 else ""

    title_start = segment[start + end :].find(TAG_END) + start + end + len(TAG_END)
    title_end = segment[title_start:].find(ANCHOR_CLOSE)
    title = segment[title_start : title_start + title_end] if title_end != -1 else ""

    return link, title
