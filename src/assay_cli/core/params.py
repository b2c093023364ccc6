"""Pure mapping of CLI flag values onto API query parameters."""

from __future__ import annotations

import logging
from typing import Any

log = logging.getLogger(__name__)

DOCUMENT_FILTERS: tuple[str, ...] = ("public", "personal", "private")
LEGACY_VISIBILITIES: tuple[str, ...] = ("private", "public", "all")
SUMMARY_TYPES: tuple[str, ...] = ("comprehensive", "casual", "faq")
DEFAULT_FILTER = "public"
DEFAULT_LIMIT = 20


def resolve_document_filter(
    filter_value: str | None,
    visibility: str | None,
) -> str:
    """Pick the ``filter`` query value from the new and deprecated flags.

    Precedence: ``--filter`` when given, else the deprecated
    ``--visibility``, else :data:`DEFAULT_FILTER`.
    """
    if visibility is not None:
        if filter_value is not None:
            log.info("Ignoring deprecated --visibility=%s; --filter=%s wins", visibility, filter_value)
        else:
            log.warning("--visibility is deprecated; use --filter instead")
    if filter_value is not None:
        return filter_value
    if visibility is not None:
        return visibility
    return DEFAULT_FILTER


def build_search_params(
    *,
    query: str | None = None,
    theme: str | None = None,
    author: str | None = None,
    title: str | None = None,
    keywords: str | None = None,
    filter_value: str = DEFAULT_FILTER,
    limit: int = DEFAULT_LIMIT,
) -> dict[str, Any]:
    """Build ``/documents/search`` query parameters, omitting empty criteria."""
    params: dict[str, Any] = {"filter": filter_value, "limit": limit}
    criteria = {
        "q": query,
        "theme": theme,
        "author": author,
        "title": title,
        "keywords": keywords,
    }
    params.update({name: value for name, value in criteria.items() if value})
    return params
