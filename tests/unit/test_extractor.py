"""Unit tests for digest entry extraction."""

from conftest import story

from hnreader.services.extractor import extract_articles

DATE = "Tue, 16 Jan 2024 04:00:00 +0000"


class TestExtractArticles:
    """Tests for extract_articles."""

    def test_extracts_single_story(self) -> None:
        """Should pull article link, comment link and title from one entry."""
        description = "<ul>" + story(
            "https://example.com/post", "https://news.ycombinator.com/item?id=1", "A Post"
        ) + "</ul>"

        articles = extract_articles(description, DATE)

        assert len(articles) == 1
        article = articles[0]
        assert article.article_link == "https://example.com/post"
        assert article.comment_link == "https://news.ycombinator.com/item?id=1"
        assert article.title == "A Post"
        assert article.date == DATE

    def test_leaves_store_fields_unset(self) -> None:
        """Should not assign id, read flag or creation time."""
        articles = extract_articles(story("https://a.test", "https://c.test", "T"), DATE)

        assert articles[0].id is None
        assert articles[0].read is False
        assert articles[0].created_at is None

    def test_preserves_entry_order(self) -> None:
        """Should return entries in document order."""
        description = "".join(
            story(f"https://example.com/{n}", f"https://news.test/{n}", f"Story {n}")
            for n in range(3)
        )

        articles = extract_articles(description, DATE)

        assert [a.title for a in articles] == ["Story 0", "Story 1", "Story 2"]

    def test_drops_entry_without_comment_link(self) -> None:
        """One well-formed entry and one without a comment span yield one article."""
        description = (
            story("https://example.com/good", "https://news.test/good", "Good")
            + '<li><span class="storylink"><a href="https://example.com/bad">Bad</a></span></li>'
        )

        articles = extract_articles(description, DATE)

        assert len(articles) == 1
        assert articles[0].title == "Good"

    def test_drops_entry_with_empty_title(self) -> None:
        """Should skip entries whose anchor text is empty."""
        articles = extract_articles(story("https://a.test", "https://c.test", ""), DATE)

        assert articles == []

    def test_drops_entry_with_empty_article_link(self) -> None:
        """Should skip entries whose story href is empty."""
        articles = extract_articles(story("", "https://c.test", "Title"), DATE)

        assert articles == []

    def test_empty_description(self) -> None:
        """Should return an empty list for an empty fragment."""
        assert extract_articles("", DATE) == []

    def test_fragment_without_marker(self) -> None:
        """Should ignore list entries that are not stories."""
        description = '<ul><li><a href="https://example.com">Not a story</a></li></ul>'

        assert extract_articles(description, DATE) == []

    def test_marker_with_different_markup(self) -> None:
        """Should drop entries whose markup no longer matches the expected shape."""
        description = (
            '<li><span class="storylink extra"><a href="https://a.test">T</a></span>'
            '<span class="postlink"><a href="https://c.test">comments</a></span></li>'
        )

        assert extract_articles(description, DATE) == []

    def test_unterminated_href(self) -> None:
        """Should drop an entry whose story href has no closing quote."""
        description = '<li><span class="storylink"><a href="https://a.test'

        assert extract_articles(description, DATE) == []

    def test_title_keeps_markup_entities(self) -> None:
        """Should keep the anchor text exactly as published."""
        articles = extract_articles(
            story("https://a.test", "https://c.test", "Rust &amp; Go"), DATE
        )

        assert articles[0].title == "Rust &amp; Go"

    def test_title_without_tag_end_starts_after_closing_quote(self) -> None:
        """Should read the title from just past the href quote when no '">' follows."""
        description = (
            '<li><span class="postlink"><a href="https://c.test" rel=x>comments</a></span>'
            '<span class="storylink"><a href="https://a.test" title=y>Title</a></span></li>'
        )

        articles = extract_articles(description, DATE)

        assert len(articles) == 1
        assert articles[0].article_link == "https://a.test"
        assert articles[0].comment_link == "https://c.test"
        assert articles[0].title == " title=y>Title"
