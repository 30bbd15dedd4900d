"""HTTP routes for HN Reader."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from jinja2 import TemplateError

from hnreader.api.dependencies import AppContext, get_context
from hnreader.api.models import ApiDataResponse, StatusResponse
from hnreader.clients.store import StorageError
from hnreader.models import Article
from hnreader.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

PAGE_TITLE = "HN Reader"


def _timestamp() -> str:
    """Current time in RFC 3339 format."""
    return datetime.now(UTC).isoformat(timespec="seconds")


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, ctx: AppContext = Depends(get_context)) -> Response:
    """Render the unread articles and the last sync time."""
    articles: list[Article] = []
    try:
        articles = await ctx.store.list_unread()
    except StorageError as e:
        logger.error("Error fetching articles", error=e.reason)

    try:
        return ctx.templates.TemplateResponse(
            request,
            "home.html",
            {
                "title": PAGE_TITLE,
                "last_sync_time": ctx.state.last_sync_time,
                "articles": articles,
                "syncing": ctx.runner.is_syncing,
            },
        )
    except TemplateError as e:
        logger.error("Template error", error=str(e))
        return PlainTextResponse(
            "Error rendering template", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@router.post("/sync", response_model=StatusResponse)
async def sync(ctx: AppContext = Depends(get_context)) -> StatusResponse:
    """Start a background sync and acknowledge immediately."""
    dispatched = ctx.runner.trigger("manual")
    return StatusResponse(
        status="sync started" if dispatched else "sync already running",
        timestamp=_timestamp(),
    )


@router.post("/mark-read", response_model=StatusResponse)
async def mark_read(
    raw_id: str | None = Query(default=None, alias="id", description="Article ID"),
    read: str | None = Query(default=None, description="'true' to mark read"),
    ctx: AppContext = Depends(get_context),
) -> StatusResponse:
    """Set the read flag of one article."""
    if not raw_id or not read:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing id or read parameter",
        )

    try:
        article_id = int(raw_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid id parameter",
        ) from e

    try:
        await ctx.store.set_read(article_id, read == "true")
    except StorageError as e:
        logger.error("Error updating article", error=e.reason, id=article_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update article",
        ) from e

    return StatusResponse(status="success", timestamp=_timestamp())


@router.get("/health", response_model=StatusResponse)
async def health() -> StatusResponse:
    """Health check endpoint."""
    return StatusResponse(status="healthy", timestamp=_timestamp())


@router.api_route("/api/data", methods=["GET", "POST"], response_model=ApiDataResponse)
async def api_data(request: Request) -> ApiDataResponse:
    """Diagnostic endpoint echoing the request method."""
    return ApiDataResponse(
        message="Hello from the API",
        timestamp=_timestamp(),
        method=request.method,
    )
