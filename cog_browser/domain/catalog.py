from __future__ import annotations

from typing import Any, List, Mapping, Sequence, Tuple
import logging
import math

from cog_browser.domain.cog_utils import contains_text, natural_sort_key
from cog_browser.domain.entities import InvalidRepo, Package, RepoCategory, parse_repo
from cog_browser.domain.models import CatalogPage, CatalogQuery

logger = logging.getLogger(__name__)


def build_catalog(raw_index: Mapping[str, Any], include_unapproved: bool) -> List[Package]:
    """
    Flatten the index into the list of cogs a request may see.

    Invalid repositories are dropped with a warning. Unapproved repositories
    are skipped unless requested. Hidden and disabled cogs never make it in.
    """
    packages: List[Package] = []
    skipped_repos = 0

    for source_key, repo_data in raw_index.items():
        try:
            repo = parse_repo(source_key, repo_data)
        except InvalidRepo as e:
            skipped_repos += 1
            logger.warning(f"Skipping repository: {e}")
            continue

        if repo.category is RepoCategory.UNAPPROVED and not include_unapproved:
            continue

        packages.extend(pkg for pkg in repo.packages if pkg.is_visible)

    logger.debug(
        f"Built catalog of {len(packages)} cogs from {len(raw_index)} repositories "
        f"({skipped_repos} invalid)"
    )
    return packages


def _matches_search(pkg: Package, search: str) -> bool:
    if (
        contains_text(pkg.name, search)
        or contains_text(pkg.display_description, search)
        or search.lower() in pkg.tags
    ):
        return True
    if any(contains_text(author, search) for author in pkg.author):
        return True
    return any(contains_text(req, search) for req in pkg.all_requirements)


def paginate(items: Sequence[Package], page: int, per_page: int) -> Tuple[List[Package], int]:
    """
    Return the items of ``page`` (1-based) and the total page count.

    The page count is 0 for an empty sequence; an out-of-range page yields
    no items.
    """
    page_count = math.ceil(len(items) / per_page)
    if page < 1 or page > page_count:
        return [], page_count
    start = (page - 1) * per_page
    return list(items[start:start + per_page]), page_count


def query_catalog(catalog: Sequence[Package], query: CatalogQuery) -> CatalogPage:
    # Step 1: tag filter
    matches = [
        pkg for pkg in catalog
        if not query.tag_filter or query.tag_filter in pkg.tags
    ]

    # Step 2: free-text search
    if query.search:
        matches = [pkg for pkg in matches if _matches_search(pkg, query.search)]

    # Step 3: natural, case-insensitive name order (sorted() is stable)
    matches = sorted(matches, key=lambda pkg: natural_sort_key(pkg.name))

    # Step 4: paginate
    items, page_count = paginate(matches, query.page, query.per_page)

    return CatalogPage(
        items=items,
        page=query.page,
        page_count=page_count,
        total=len(matches),
    )
