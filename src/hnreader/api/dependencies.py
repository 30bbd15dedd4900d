"""Application context shared with request handlers."""

from dataclasses import dataclass

from fastapi import Request
from fastapi.templating import Jinja2Templates

from hnreader.clients.feed import FeedFetcher
from hnreader.clients.store import ArticleStore
from hnreader.config import Settings
from hnreader.services.orchestrator import SyncState
from hnreader.services.scheduler import SyncRunner


@dataclass
class AppContext:
    """Resources created at startup and released at shutdown."""

    settings: Settings
    store: ArticleStore
    fetcher: FeedFetcher
    state: SyncState
    runner: SyncRunner
    templates: Jinja2Templates


def get_context(request: Request) -> AppContext:
    """Return the context installed on the application by its lifespan."""
    return request.app.state.context
