"""Page configuration and page slicing."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar, Union

from .errors import InvalidPageConfiguration

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CURRENT_PAGE = 1
DEFAULT_PAGE_LENGTH = 50

# Environment variable supplying the default page-count policy
PAGE_COUNT_POLICY_ENV = "FILTERTABLE_PAGE_COUNT_POLICY"


class PageCountPolicy(str, Enum):
    """
    How the number of navigable pages is derived from the row count.

    FLOOR (the default) counts only full pages: a trailing partial page is
    still reachable via ``set_page`` but gets no page link. CEIL counts the
    partial page too.
    """

    FLOOR = "floor"
    CEIL = "ceil"

    @classmethod
    def resolve(cls, policy: Union["PageCountPolicy", str, None]) -> "PageCountPolicy":
        """
        Resolve a policy from an enum member, a name, or the environment.

        Args:
            policy: Policy or policy name. None reads
                ``FILTERTABLE_PAGE_COUNT_POLICY`` and falls back to FLOOR.

        Raises:
            InvalidPageConfiguration: If the name is not a known policy
        """
        if policy is None:
            policy = os.environ.get(PAGE_COUNT_POLICY_ENV, cls.FLOOR.value)
        try:
            return cls(str(policy.value if isinstance(policy, cls) else policy).lower())
        except ValueError:
            raise InvalidPageConfiguration(
                f"Unknown page count policy '{policy}'. "
                f"Expected one of: {[p.value for p in cls]}"
            ) from None


def _validate_positive_int(name: str, value: Any) -> int:
    # bool is an int subclass, but True is not a page number
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidPageConfiguration(
            f"{name} must be a positive integer, got {value!r}"
        )
    return value


@dataclass
class PageConfig:
    """
    Pagination configuration.

    Attributes:
        current_page: 1-based page number
        page_length: Rows per page, fixed for the lifetime of a Paginator
        on_change: Optional callback invoked with the new page number
    """

    current_page: int = DEFAULT_CURRENT_PAGE
    page_length: int = DEFAULT_PAGE_LENGTH
    on_change: Optional[Callable[[int], Any]] = None

    def __post_init__(self) -> None:
        _validate_positive_int("current_page", self.current_page)
        _validate_positive_int("page_length", self.page_length)

    @property
    def offset(self) -> int:
        """Index of the first row on the current page."""
        return (self.current_page - 1) * self.page_length

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageConfig":
        """
        Create from a plain dict.

        Accepts ``current_page``/``page_length``/``on_change`` and the
        camelCase ``currentPage``/``pageLength``/``onChange`` spellings.
        Missing values take the defaults.
        """
        return cls(
            current_page=data.get(
                "current_page", data.get("currentPage", DEFAULT_CURRENT_PAGE)
            ),
            page_length=data.get(
                "page_length", data.get("pageLength", DEFAULT_PAGE_LENGTH)
            ),
            on_change=data.get("on_change", data.get("onChange")),
        )


PageConfigLike = Union[PageConfig, Mapping[str, Any]]


def slice_page(rows: Sequence[T], current_page: int, page_length: int) -> Sequence[T]:
    """
    Slice one page out of a row sequence.

    Returns rows ``[(current_page - 1) * page_length, current_page * page_length)``
    clipped to the available range. Pages below 1 or past the end give an
    empty result.

    Args:
        rows: Filtered rows
        current_page: 1-based page number
        page_length: Rows per page

    Returns:
        The rows on the page
    """
    if current_page < 1:
        return rows[0:0]
    start = (current_page - 1) * page_length
    return rows[start : start + page_length]


def count_pages(
    total_rows: int,
    page_length: int,
    policy: PageCountPolicy = PageCountPolicy.FLOOR,
) -> int:
    """
    Number of navigable pages for a row count.

    Args:
        total_rows: Number of filtered rows
        page_length: Rows per page
        policy: FLOOR ignores a trailing partial page, CEIL counts it

    Returns:
        Page count
    """
    if policy is PageCountPolicy.CEIL:
        return -(-total_rows // page_length)
    return total_rows // page_length


class Paginator:
    """
    Slices filtered rows into pages.

    The paginator owns the current page number. ``page_length`` is fixed at
    construction; ``set_page`` is the only way to move between pages and
    does not check the requested page against ``page_count``.

    Example:
        paginator = Paginator(PageConfig(current_page=1, page_length=50))
        first_page = paginator.slice(filtered_rows)
        paginator.set_page(3)
    """

    def __init__(
        self,
        page_config: Optional[PageConfigLike] = None,
        policy: Union[PageCountPolicy, str, None] = None,
    ):
        """
        Initialize the Paginator.

        Args:
            page_config: PageConfig or dict. Defaults to page 1 of 50 rows.
            policy: Page-count policy or its name. None reads the
                ``FILTERTABLE_PAGE_COUNT_POLICY`` environment variable and
                falls back to FLOOR.

        Raises:
            InvalidPageConfiguration: If the configuration is invalid
        """
        if page_config is None:
            page_config = PageConfig()
        elif not isinstance(page_config, PageConfig):
            page_config = PageConfig.from_dict(page_config)

        self._page_length = page_config.page_length
        self._current_page = page_config.current_page
        self._on_change = page_config.on_change
        self._policy = PageCountPolicy.resolve(policy)

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def page_length(self) -> int:
        return self._page_length

    @property
    def policy(self) -> PageCountPolicy:
        return self._policy

    @property
    def page_config(self) -> PageConfig:
        """
        Current configuration as a PageConfig.

        Raises:
            InvalidPageConfiguration: If ``set_page`` moved to a page below 1
        """
        return PageConfig(
            current_page=self._current_page,
            page_length=self._page_length,
            on_change=self._on_change,
        )

    def set_page(self, page: int) -> None:
        """
        Move to ``page``.

        No bounds check: pages outside ``1..page_count`` give an empty
        slice. The configured ``on_change`` callback, if any, is called
        with the new page.
        """
        logger.debug("Page %s -> %s", self._current_page, page)
        self._current_page = page
        if self._on_change is not None:
            self._on_change(page)

    def restore_page(self, page: int) -> None:
        """Restore a page number kept elsewhere, without calling on_change."""
        self._current_page = page

    def slice(
        self,
        filtered_rows: Sequence[T],
        page_config: Optional[PageConfigLike] = None,
    ) -> Sequence[T]:
        """
        Return the rows visible on a page.

        Args:
            filtered_rows: Rows produced by FilterEngine.apply
            page_config: Optional explicit configuration. Defaults to this
                paginator's current page and page length.

        Returns:
            Rows on the page (possibly fewer than page_length, or none)
        """
        if page_config is None:
            return slice_page(filtered_rows, self._current_page, self._page_length)
        if not isinstance(page_config, PageConfig):
            page_config = PageConfig.from_dict(page_config)
        return slice_page(
            filtered_rows, page_config.current_page, page_config.page_length
        )

    def page_count(
        self, filtered_rows: Sequence[Any], page_length: Optional[int] = None
    ) -> int:
        """
        Number of page links to offer for the filtered rows.

        Uses floor division under the default policy, so 125 rows at 50 per
        page give 2 pages.
        """
        if page_length is None:
            page_length = self._page_length
        else:
            _validate_positive_int("page_length", page_length)
        return count_pages(len(filtered_rows), page_length, self._policy)

    def should_paginate(self, filtered_rows: Sequence[Any]) -> bool:
        """Page links are shown only when rows overflow a single page."""
        return len(filtered_rows) > self._page_length

    def __repr__(self) -> str:
        return (
            f"Paginator(current_page={self._current_page}, "
            f"page_length={self._page_length}, policy='{self._policy.value}')"
        )
