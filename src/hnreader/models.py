"""Shared data models for HN Reader."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Article:
    """A curated link surfaced on a given digest date.

    ``id`` and ``created_at`` are assigned by the store; articles built by the
    extractor leave them unset.
    """

    date: str
    article_link: str
    comment_link: str
    title: str
    id: int | None = None
    read: bool = False
    created_at: datetime | None = None
