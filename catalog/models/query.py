"""
Product query descriptor.

Describes one listing request: filters, sort and page. Construction never
fails; malformed values fall back to defaults so listing stays total.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Type, TypeVar

from catalog.models.product import Product

DEFAULT_PAGE_SIZE = 12
ALL_CATEGORIES = "all"

E = TypeVar("E", bound=Enum)


class SortKey(str, Enum):
    CREATED_AT = "createdAt"
    NAME = "name"
    PRICE = "price"
    RATING = "rating"
    STOCK = "stock"
    VIEWS = "views"
    SALES = "sales"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class StockFilter(str, Enum):
    ALL = "all"
    IN_STOCK = "inStock"
    OUT_OF_STOCK = "outOfStock"
    LOW_STOCK = "lowStock"


def _fold(text: str) -> str:
    return text.replace("_", "").replace("-", "").lower()


def coerce_enum(enum_cls: Type[E], value: Any, default: E) -> E:
    """
    Map a raw value onto an enum member.

    Matches member values and names, ignoring case and separators, so
    "createdAt", "created_at" and "CREATED_AT" all resolve to the same key.
    Anything unrecognized returns the default.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return default

    folded = _fold(value.strip())
    for member in enum_cls:
        if folded in (_fold(member.value), _fold(member.name)):
            return member
    return default


def optional_number(value: Any) -> Optional[float]:
    """Finite number or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def positive_int(value: Any, default: int) -> int:
    """Positive integer, or the default for anything else."""
    number = optional_number(value)
    if number is None or not number.is_integer() or number < 1:
        return default
    return int(number)


@dataclass
class ProductQuery:
    """
    Filter, sort and pagination options for a product listing.

    Numeric bounds are inclusive. A page_size that is not a positive
    integer is coerced to DEFAULT_PAGE_SIZE rather than rejected.
    """
    text: Optional[str] = None
    category: str = ALL_CATEGORIES
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_rating: Optional[float] = None
    stock_filter: StockFilter = StockFilter.ALL
    sort_by: SortKey = SortKey.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        self.text = str(self.text).strip() if self.text is not None else None
        if not self.text:
            self.text = None

        self.category = str(self.category).strip() if self.category else ALL_CATEGORIES
        if not self.category:
            self.category = ALL_CATEGORIES

        self.min_price = optional_number(self.min_price)
        self.max_price = optional_number(self.max_price)
        self.min_rating = optional_number(self.min_rating)

        self.stock_filter = coerce_enum(StockFilter, self.stock_filter, StockFilter.ALL)
        self.sort_by = coerce_enum(SortKey, self.sort_by, SortKey.CREATED_AT)
        self.sort_order = coerce_enum(SortOrder, self.sort_order, SortOrder.DESC)

        self.page = positive_int(self.page, 1)
        self.page_size = positive_int(self.page_size, DEFAULT_PAGE_SIZE)

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ProductQuery":
        """
        Build a query from a decoded parameter mapping (e.g. a URL query).

        Accepts "q" for text and "inStock" for stockFilter as well.
        """
        def pick(*names):
            for name in names:
                if params.get(name) not in (None, ""):
                    return params[name]
            return None

        return cls(
            text=pick("text", "q"),
            category=pick("category"),
            min_price=pick("minPrice", "min_price"),
            max_price=pick("maxPrice", "max_price"),
            min_rating=pick("minRating", "min_rating"),
            stock_filter=pick("stockFilter", "stock_filter", "inStock"),
            sort_by=pick("sortBy", "sort_by"),
            sort_order=pick("sortOrder", "sort_order"),
            page=pick("page"),
            page_size=pick("pageSize", "page_size"),
        )


@dataclass
class ListResult:
    """One page of a listing plus the size of the whole matching set."""
    items: List[Product] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0

    def to_dict(self) -> dict:
        return {
            "items": [p.to_dict() for p in self.items],
            "total": self.total,
            "total_pages": self.total_pages,
        }
