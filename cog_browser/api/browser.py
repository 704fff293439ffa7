"""
HTML catalog routes.

Query-string input is sanitized here before it reaches the catalog pipeline:
- ``ua``: '1' includes unapproved repositories
- ``search``: free-text search term
- ``filter_tag``: exact tag filter
- ``p``: 1-based page number
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import logging
import re
import urllib.parse

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from cog_browser.core.dependencies import get_config, get_index_fetcher
from cog_browser.domain.catalog import build_catalog, query_catalog
from cog_browser.domain.models import BrowserConfig, CatalogQuery
from cog_browser.services.index_fetcher import IndexFetcher, IndexUnavailable

logger = logging.getLogger(__name__)
router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))

_SEARCH_DISALLOWED = re.compile(r"[^-a-zA-Z0-9 ]")
_TAG_DISALLOWED = re.compile(r"[^-a-zA-Z0-9_]")
_PAGE_DISALLOWED = re.compile(r"[^0-9]")


def sanitize_search(value: Optional[str]) -> str:
    return _SEARCH_DISALLOWED.sub("", value or "")


def sanitize_tag(value: Optional[str]) -> str:
    return _TAG_DISALLOWED.sub("", value or "").lower()


def sanitize_page(value: Optional[str]) -> int:
    # capped below the int() digit limit
    digits = _PAGE_DISALLOWED.sub("", value or "").lstrip("0")[:18]
    return int(digits) if digits else 1


def build_url(query: CatalogQuery, **overrides) -> str:
    """
    Build a catalog URL from ``query`` with some fields replaced.

    Parameters at their default value are left out of the query string.
    """
    state = query.model_copy(update=overrides)
    params = {}
    if state.include_unapproved:
        params["ua"] = "1"
    if state.page > 1:
        params["p"] = str(state.page)
    if state.tag_filter:
        params["filter_tag"] = state.tag_filter
    if state.search:
        params["search"] = state.search
    return "/?" + urllib.parse.urlencode(params)


@router.get("/", response_class=HTMLResponse)
async def catalog_page(
    request: Request,
    ua: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    filter_tag: Optional[str] = Query(default=None),
    p: Optional[str] = Query(default=None),
    config: BrowserConfig = Depends(get_config),
    fetcher: IndexFetcher = Depends(get_index_fetcher),
) -> HTMLResponse:
    """
    Render one page of the cog catalog.

    The index is downloaded on every request. If it cannot be obtained the
    error page is rendered instead of a partial catalog.
    """
    query = CatalogQuery(
        include_unapproved=ua == "1",
        search=sanitize_search(search),
        tag_filter=sanitize_tag(filter_tag),
        page=sanitize_page(p),
        per_page=config.per_page,
    )

    try:
        raw_index = await fetcher.fetch()
    except IndexUnavailable as e:
        logger.error(f"Cannot render catalog: {e}")
        return templates.TemplateResponse(
            request,
            "error.html",
            {"message": "The cog index is currently unavailable. Please try again later."},
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    catalog = build_catalog(raw_index, include_unapproved=query.include_unapproved)
    result = query_catalog(catalog, query)
    logger.debug(
        f"Rendering page {result.page}/{result.page_count} "
        f"({len(result.items)} of {result.total} matching cogs)"
    )

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "query": query,
            "result": result,
            "build_url": build_url,
        },
    )
