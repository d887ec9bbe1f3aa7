"""
Catalog Query Engine.

Pure filtering, sorting and pagination over a snapshot of the product
collection. Nothing here reads or writes storage.
"""

import logging
import math
from typing import Any, Callable, Dict, Iterable, List, Sequence

from catalog.models.product import Product
from catalog.models.query import (
    ALL_CATEGORIES,
    ListResult,
    ProductQuery,
    SortKey,
    SortOrder,
    StockFilter,
)
from catalog.utils.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 10

# One typed accessor per sort key; keys compare by natural ordering
SORT_ACCESSORS: Dict[SortKey, Callable[[Product], Any]] = {
    SortKey.CREATED_AT: lambda p: parse_timestamp(p.created_at),
    SortKey.NAME: lambda p: p.name.casefold(),
    SortKey.PRICE: lambda p: p.price,
    SortKey.RATING: lambda p: p.rating,
    SortKey.STOCK: lambda p: p.stock,
    SortKey.VIEWS: lambda p: p.views,
    SortKey.SALES: lambda p: p.sales,
}

STOCK_PREDICATES: Dict[StockFilter, Callable[[Product], bool]] = {
    StockFilter.IN_STOCK: lambda p: p.stock > 0,
    StockFilter.OUT_OF_STOCK: lambda p: p.stock == 0,
    StockFilter.LOW_STOCK: lambda p: 0 < p.stock < LOW_STOCK_THRESHOLD,
}


def matches_text(product: Product, text: str) -> bool:
    """Case-insensitive substring match against name, description or any tag."""
    needle = text.casefold()
    if needle in product.name.casefold() or needle in product.description.casefold():
        return True
    return any(needle in tag.casefold() for tag in product.tags)


def build_predicates(query: ProductQuery) -> List[Callable[[Product], bool]]:
    """
    Translate a query into independent predicates.

    The predicates commute, so the order they are applied in does not
    change the matching set.
    """
    predicates: List[Callable[[Product], bool]] = []

    if query.text:
        predicates.append(lambda p: matches_text(p, query.text))
    if query.category != ALL_CATEGORIES:
        predicates.append(lambda p: p.category == query.category)
    if query.min_price is not None:
        predicates.append(lambda p: p.price >= query.min_price)
    if query.max_price is not None:
        predicates.append(lambda p: p.price <= query.max_price)
    if query.min_rating is not None:
        predicates.append(lambda p: p.rating >= query.min_rating)
    if query.stock_filter in STOCK_PREDICATES:
        predicates.append(STOCK_PREDICATES[query.stock_filter])

    return predicates


def filter_products(products: Iterable[Product], query: ProductQuery) -> List[Product]:
    predicates = build_predicates(query)
    return [p for p in products if all(check(p) for check in predicates)]


def sort_products(
    products: Sequence[Product],
    sort_by: SortKey,
    sort_order: SortOrder
) -> List[Product]:
    """
    Stable sort by a single key.

    Products with equal keys keep their collection order for both
    ascending and descending sorts.
    """
    return sorted(
        products,
        key=SORT_ACCESSORS[sort_by],
        reverse=(sort_order == SortOrder.DESC)
    )


def paginate(products: Sequence[Product], page: int, page_size: int) -> ListResult:
    """
    Slice one page out of an already sorted sequence.

    A page past the end yields an empty item list with the real totals.
    """
    total = len(products)
    total_pages = math.ceil(total / page_size)
    start = (page - 1) * page_size
    return ListResult(
        items=list(products[start:start + page_size]),
        total=total,
        total_pages=total_pages
    )


def list_products(products: Sequence[Product], query: ProductQuery) -> ListResult:
    """
    Filter, sort and paginate a product collection.

    Args:
        products: Snapshot of the collection in stored order
        query: Normalized query descriptor

    Returns:
        ListResult with the requested page and totals over the matching set
    """
    matching = filter_products(products, query)
    ordered = sort_products(matching, query.sort_by, query.sort_order)
    result = paginate(ordered, query.page, query.page_size)

    logger.debug(
        f"Listed page {query.page}/{result.total_pages} "
        f"({len(result.items)} of {result.total} matching, "
        f"sort={query.sort_by.value} {query.sort_order.value})"
    )
    return result


def list_categories(products: Iterable[Product]) -> List[str]:
    """Return "all" followed by distinct categories in first-seen order."""
    categories = [ALL_CATEGORIES]
    seen = set()
    for product in products:
        if product.category not in seen:
            seen.add(product.category)
            categories.append(product.category)
    return categories


def related_products(
    products: Sequence[Product],
    subject: Product,
    limit: int = 4
) -> List[Product]:
    """
    Other products in the subject's category, best rated first.

    The subject itself is always excluded. Equal ratings keep collection order.
    """
    candidates = [
        p for p in products
        if p.id != subject.id and p.category == subject.category
    ]
    candidates = sorted(candidates, key=lambda p: p.rating, reverse=True)
    return candidates[:max(0, limit)]


# Design Rationale and Trade-offs:
#
# 1. Filters run before the sort, and the sort runs before the slice
#    - total and total_pages count every match, not one page
#    - Filters commute, so predicate order does not change results
#    - Trade-off: every listing sorts the full matching set
#
# 2. One accessor per SortKey in SORT_ACCESSORS
#    - Adding a sort key means adding one table entry
#    - desc is sorted(reverse=True), so ties keep collection order both ways
#    - Trade-off: unknown keys are rejected earlier, by ProductQuery
#
# 3. Pure functions over a list of Product
#    - No storage access and no view recording here
#    - Trade-off: callers pass the whole collection on every call
