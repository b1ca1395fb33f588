"""
SearchQuery - Normalized, immutable search request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from search_fusion.core.exceptions import InvalidParameterError, InvalidQueryError

logger = logging.getLogger(__name__)


class SortMode(Enum):
    """Result ordering requested from providers."""

    RELEVANCE = "relevance"
    DATE = "date"


class ResultType(Enum):
    """Kind of results requested."""

    WEB = "web"
    IMAGE = "image"


def _parse_positive_int(value: Any) -> int | None:
    """Parse a positive integer, returning None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


def _parse_enum(enum_cls: type[Enum], value: Any, default: Enum) -> Enum:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    return default


@dataclass(frozen=True)
class SearchQuery:
    """
    One search request after validation.

    Attributes:
        text: Trimmed, non-empty keywords
        page: 1-based page number
        start_index: Optional 1-based result offset, overrides page
        sort: Relevance or date ordering
        result_type: Web pages or images
    """

    text: str
    page: int = 1
    start_index: int | None = None
    sort: SortMode = SortMode.RELEVANCE
    result_type: ResultType = ResultType.WEB

    def __post_init__(self) -> None:
        if not isinstance(self.text, str) or not self.text.strip():
            raise InvalidQueryError(self.text)
        if self.text != self.text.strip():
            object.__setattr__(self, "text", self.text.strip())
        if self.page < 1:
            raise InvalidParameterError("page", self.page, "a positive integer")
        if self.start_index is not None and self.start_index < 1:
            raise InvalidParameterError("startIndex", self.start_index, "a positive integer")

    @classmethod
    def from_params(
        cls,
        text: Any,
        page: Any = None,
        start_index: Any = None,
        sort: Any = None,
        result_type: Any = None,
    ) -> SearchQuery:
        """
        Build a query from raw request parameters.

        Blank text is rejected. Every other parameter is lenient: an invalid
        page becomes 1, an invalid start index is ignored and unknown
        sort/type values fall back to relevance/web.
        """
        q = text.strip() if isinstance(text, str) else ""
        if not q:
            raise InvalidQueryError(text if isinstance(text, str) else None)

        parsed_page = _parse_positive_int(page)
        if parsed_page is None:
            if page not in (None, ""):
                logger.warning(f"Invalid page number {page!r}. Defaulting to 1.")
            parsed_page = 1

        parsed_start = _parse_positive_int(start_index)
        if parsed_start is None and start_index not in (None, ""):
            logger.warning(f"Invalid startIndex {start_index!r}. Ignoring.")

        return cls(
            text=q,
            page=parsed_page,
            start_index=parsed_start,
            sort=_parse_enum(SortMode, sort, SortMode.RELEVANCE),  # type: ignore[arg-type]
            result_type=_parse_enum(ResultType, result_type, ResultType.WEB),  # type: ignore[arg-type]
        )

    @property
    def is_image(self) -> bool:
        return self.result_type is ResultType.IMAGE

    def offset(self, per_page: int = 10) -> int:
        """1-based index of the first requested result."""
        if self.start_index is not None:
            return self.start_index
        return (self.page - 1) * per_page + 1

    def cache_fields(self) -> dict[str, Any]:
        """Fields that identify a response in the cache."""
        return {
            "q": self.text,
            "page": self.page,
            "sort": self.sort.value,
            "type": self.result_type.value,
            "startIndex": self.start_index,
        }
