"""
Paginated, sortable, keyword-searchable listings

This module contains the single listing policy shared by every explore page:
- Keyword validation
- Sort token resolution
- Page normalization and pagination windows
- Listing execution over injected data operations

The executor knows nothing about repositories or accounts. Each page builds a
``ListingOptions`` record with its own data operations and flags and hands it
to ``execute_listing``.
"""
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
import logging

from ..domain.models import (
    OrderBy,
    OrderField,
    SortDirection,
    SearchOptions,
    User,
    UserType,
)
from ..exceptions import ListingError, OwnerHydrationError

logger = logging.getLogger(__name__)


# Number of sibling page links shown around the current page
PAGINATION_NEIGHBOR_SPAN = 5

# Requested pages at or below the floor are normalized to 1
REPOSITORY_PAGE_FLOOR = 0
ACCOUNT_PAGE_FLOOR = 1

NULL_BYTE = "\x00"


# =============================================================================
# Keyword validation
# =============================================================================

def is_keyword_valid(keyword: str) -> bool:
    """A keyword is rejected when it carries an embedded null byte"""
    return NULL_BYTE not in keyword


# =============================================================================
# Sort token resolution
# =============================================================================

_REPOSITORY_ORDERS: Dict[str, OrderBy] = {
    "oldest": OrderBy(OrderField.CREATED, SortDirection.ASC),
    "recentupdate": OrderBy(OrderField.UPDATED, SortDirection.DESC),
    "leastupdate": OrderBy(OrderField.UPDATED, SortDirection.ASC),
    "reversealphabetically": OrderBy(OrderField.NAME, SortDirection.DESC),
    "alphabetically": OrderBy(OrderField.NAME, SortDirection.ASC),
}
_REPOSITORY_DEFAULT_ORDER = OrderBy(OrderField.CREATED, SortDirection.DESC)

_USER_ORDERS: Dict[str, OrderBy] = {
    "oldest": OrderBy(OrderField.ID, SortDirection.ASC),
    "recentupdate": OrderBy(OrderField.UPDATED, SortDirection.DESC),
    "leastupdate": OrderBy(OrderField.UPDATED, SortDirection.ASC),
    "reversealphabetically": OrderBy(OrderField.NAME, SortDirection.DESC),
    "alphabetically": OrderBy(OrderField.NAME, SortDirection.ASC),
}
_USER_DEFAULT_ORDER = OrderBy(OrderField.ID, SortDirection.DESC)


def resolve_repository_order(sort_token: str) -> OrderBy:
    """Map a sort token to a repository ordering, newest first by default"""
    return _REPOSITORY_ORDERS.get(sort_token, _REPOSITORY_DEFAULT_ORDER)


def resolve_user_order(sort_token: str) -> OrderBy:
    """Map a sort token to an account ordering, highest id first by default"""
    return _USER_ORDERS.get(sort_token, _USER_DEFAULT_ORDER)


# =============================================================================
# Pagination
# =============================================================================

@dataclass(frozen=True)
class PageLink:
    """One numbered link of a pagination control"""
    num: int
    is_current: bool


@dataclass(frozen=True)
class PaginationWindow:
    """
    Metadata needed to render page-link controls

    Build it with ``build_pagination``, which keeps ``page_size`` positive and
    ``current_page`` within ``[1, total_pages]``.
    """
    current_page: int
    page_size: int
    total_count: int
    visible_neighbor_span: int = PAGINATION_NEIGHBOR_SPAN

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0:
            return 1
        return (self.total_count + self.page_size - 1) // self.page_size

    @property
    def is_first(self) -> bool:
        return self.current_page == 1

    @property
    def is_last(self) -> bool:
        return self.current_page >= self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def previous(self) -> int:
        return self.current_page - 1 if self.has_previous else self.current_page

    @property
    def next(self) -> int:
        return self.current_page + 1 if self.has_next else self.current_page

    def pages(self) -> List[PageLink]:
        """Page links centred on the current page, at most visible_neighbor_span of them"""
        span = self.visible_neighbor_span
        if span <= 0:
            return []

        total = self.total_pages
        anchor = min(self.current_page, total)
        start = max(1, anchor - span // 2)
        end = min(total, start + span - 1)
        start = max(1, end - span + 1)

        return [PageLink(num=num, is_current=num == self.current_page) for num in range(start, end + 1)]


def normalize_page(page: int, floor: int) -> int:
    """Return 1 for any page at or below floor, otherwise the page unchanged"""
    if page <= floor:
        return 1
    return page


def build_pagination(page: int, total_count: int, page_size: int) -> PaginationWindow:
    """
    Build the pagination window for an already normalized page

    A page size below 1 is treated as 1. A page past the end is pulled back to
    the last page so every link points at an existing page; the listing itself
    is still fetched with the requested page and comes back empty.
    """
    if page_size <= 0:
        page_size = 1

    window = PaginationWindow(
        current_page=page,
        page_size=page_size,
        total_count=total_count,
    )
    if page > window.total_pages:
        return replace(window, current_page=window.total_pages)
    return window


# =============================================================================
# Listing execution
# =============================================================================

Counter = Callable[[bool], Awaitable[int]]
Ranger = Callable[[SearchOptions], Awaitable[List[Any]]]
Searcher = Callable[[SearchOptions], Awaitable[Tuple[List[Any], int]]]
Hydrator = Callable[[Any], Awaitable[Any]]


@dataclass
class SearchRequest:
    """Raw listing parameters of one incoming request"""
    page: int = 0
    sort_token: str = ""
    keyword: str = ""


@dataclass(frozen=True)
class ListingOptions:
    """
    Capability record describing one kind of listing

    Attributes:
        page_size: Items per page
        counter: Counts the unfiltered collection for a visibility flag
        ranger: Returns one unfiltered page
        searcher: Returns one page of keyword matches and the match count
        order_by: Resolves a sort token for this kind
        page_floor: Requested pages at or below this value become page 1
        searcher_name: Operation name reported when searcher fails
        hydrate: Loads related data for every returned item, if set
        user_type: Account type filter for keyword search
        private: Include private entities
        search_by_email: Let keyword search match account emails
        show_email: Display flag handed back to the caller
        requester: Identity of the requesting account, if any
    """
    page_size: int
    counter: Counter
    ranger: Ranger
    searcher: Searcher
    order_by: Callable[[str], OrderBy]
    page_floor: int
    searcher_name: str
    hydrate: Optional[Hydrator] = None
    user_type: Optional[UserType] = None
    private: bool = False
    search_by_email: bool = False
    show_email: bool = False
    requester: Optional[User] = None


@dataclass
class ResultPage:
    """One listing page plus the display state a renderer needs"""
    items: List[Any]
    total_count: int
    pagination: PaginationWindow
    keyword: str = ""
    sort_type: str = ""
    show_email: bool = False


async def execute_listing(request: SearchRequest, options: ListingOptions) -> ResultPage:
    """
    Produce one listing page

    An empty keyword lists the whole collection through ``ranger`` and
    ``counter``. A non-empty keyword goes through ``searcher``, which returns
    items and count together. A keyword with a null byte yields an empty page
    without touching the data store.

    Raises:
        ListingError: A data operation failed
        OwnerHydrationError: ``hydrate`` failed for one of the items
    """
    page = normalize_page(request.page, options.page_floor)
    order_by = options.order_by(request.sort_token)
    keyword = request.keyword.strip(" ")

    items: List[Any] = []
    count = 0

    if len(keyword) == 0:
        try:
            items = await options.ranger(SearchOptions(
                order_by=order_by,
                page=page,
                page_size=options.page_size,
                searcher=options.requester,
            ))
        except Exception as e:
            logger.error(f"Listing ranger failed on page {page}: {e}")
            raise ListingError("opts.Ranger", e) from e

        try:
            count = await options.counter(options.private)
        except Exception as e:
            logger.error(f"Listing counter failed: {e}")
            raise ListingError("opts.Counter", e) from e
    elif is_keyword_valid(keyword):
        try:
            items, count = await options.searcher(SearchOptions(
                keyword=keyword,
                order_by=order_by,
                private=options.private,
                page=page,
                page_size=options.page_size,
                searcher=options.requester,
                user_type=options.user_type,
                search_by_email=options.search_by_email,
            ))
        except Exception as e:
            logger.error(f"Keyword search {keyword!r} failed: {e}")
            raise ListingError(options.searcher_name, e) from e
    else:
        logger.debug("Ignoring keyword with embedded null byte")

    if options.hydrate is not None:
        for item in items:
            try:
                await options.hydrate(item)
            except Exception as e:
                logger.error(f"Failed to load owner of {item.id}: {e}")
                raise OwnerHydrationError(item.id, e) from e

    logger.debug(
        f"Listing page={page} order={order_by.to_sql()} keyword={keyword!r} "
        f"returned {len(items)} of {count}"
    )

    return ResultPage(
        items=list(items),
        total_count=count,
        pagination=build_pagination(page, count, options.page_size),
        keyword=keyword,
        sort_type=request.sort_token,
        show_email=options.show_email,
    )
