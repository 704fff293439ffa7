"""
Pydantic models for the cog browser.

This module defines:
- Application configuration (index location, page size, fetch policy)
- The per-request catalog query
- The page of results handed to the presentation layer

Entities parsed from the index live in ``cog_browser.domain.entities``.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cog_browser.domain.entities import Package


DEFAULT_INDEX_URL = "https://raw.githubusercontent.com/Cog-Creators/Red-Index/master/index"
DEFAULT_PER_PAGE = 25


# ---------------------------------------------------------------------------
# Application Configuration
# ---------------------------------------------------------------------------


class BrowserConfig(BaseModel):
    """
    Top-level configuration for the cog browser.

    Values are read from environment variables by
    ``cog_browser.core.dependencies.get_config``.
    """

    index_url: str = Field(
        default=DEFAULT_INDEX_URL,
        description="Base URL of the Red index; '1-min.json' is fetched from below it.",
    )
    per_page: int = Field(
        default=DEFAULT_PER_PAGE,
        ge=1,
        description="Number of cogs shown on a single page.",
    )
    fetch_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for a single index download attempt.",
    )
    fetch_attempts: int = Field(
        default=3,
        ge=1,
        description="How many times the index download is attempted before giving up.",
    )

    @field_validator("index_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def index_json_url(self) -> str:
        return f"{self.index_url}/1-min.json"


# ---------------------------------------------------------------------------
# Query Models
# ---------------------------------------------------------------------------


class CatalogQuery(BaseModel):
    """
    Filters, search term and page requested by a single browser request.

    Input is expected to be sanitized already; the tag filter is lower-cased
    here so that it compares directly against the lower-cased cog tags.
    """

    include_unapproved: bool = Field(
        default=False,
        description="Include cogs from repositories that have not been approved.",
    )
    tag_filter: str = Field(
        default="",
        description="Exact tag every listed cog must carry. Empty means no filter.",
    )
    search: str = Field(
        default="",
        description="Free-text search term. Empty means no search.",
    )
    page: int = Field(
        default=1,
        ge=1,
        description="1-based page number.",
    )
    per_page: int = Field(
        default=DEFAULT_PER_PAGE,
        gt=0,
        description="Page size.",
    )

    @field_validator("tag_filter")
    @classmethod
    def _lower_tag(cls, value: str) -> str:
        return value.lower()


class CatalogPage(BaseModel):
    """
    One page of query results.

    ``page_count`` is 0 when nothing matched. ``items`` is empty when
    ``page`` lies beyond ``page_count``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: List[Package] = Field(default_factory=list)
    page: int = 1
    page_count: int = 0
    total: int = 0

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count
