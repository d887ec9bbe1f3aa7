"""
Product data model.

Represents a sellable item in the catalog, plus the normalization applied to
create/edit payloads before they reach the persisted collection.
"""

import logging
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping

logger = logging.getLogger(__name__)

# Fields that only the catalog itself may set
SYSTEM_FIELDS = ("id", "created_at", "views", "sales")

# camelCase names used by the browser payloads
FIELD_ALIASES = {
    "imageUrl": "image_url",
    "isActive": "is_active",
    "createdAt": "created_at",
}


@dataclass
class Product:
    """
    A sellable item.
    Price is in minor currency units; rating is the 0-5 average shown to shoppers.
    """
    id: str
    name: str
    description: str = ""
    price: float = 0
    category: str = ""
    rating: float = 0.0
    stock: int = 0
    image_url: str = ""
    created_at: str = ""  # ISO-8601 UTC
    tags: List[str] = field(default_factory=list)
    specifications: Dict[str, str] = field(default_factory=dict)
    is_active: bool = True
    views: int = 0
    sales: int = 0

    def __post_init__(self):
        for name in ("id", "name", "description", "category", "image_url", "created_at"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"Invalid {name}: {getattr(self, name)!r}. Must be a string")
        for name in ("price", "rating"):
            if not _is_number(getattr(self, name)):
                raise ValueError(f"Invalid {name}: {getattr(self, name)!r}. Must be a number")
        for name in ("stock", "views", "sales"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"Invalid {name}: {value!r}. Must be an integer")
        if not all(isinstance(tag, str) for tag in self.tags):
            raise ValueError(f"Invalid tags: {self.tags!r}. Must be strings")
        if not all(isinstance(v, str) for v in self.specifications.values()):
            raise ValueError(f"Invalid specifications: {self.specifications!r}. Values must be strings")
        if not isinstance(self.is_active, bool):
            raise ValueError(f"Invalid is_active: {self.is_active!r}. Must be a boolean")

        if self.price < 0:
            raise ValueError(f"Invalid price: {self.price}. Must be >= 0")
        if not (0 <= self.rating <= 5):
            raise ValueError(f"Invalid rating: {self.rating}. Must be 0-5")
        if self.stock < 0:
            raise ValueError(f"Invalid stock: {self.stock}. Must be >= 0")
        if self.views < 0 or self.sales < 0:
            raise ValueError("View and sales counts must be >= 0")

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        """Create Product from JSON dict."""
        data = _apply_aliases(data)
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            price=data.get("price", 0),
            category=data.get("category", ""),
            rating=data.get("rating", 0.0),
            stock=data.get("stock", 0),
            image_url=data.get("image_url", ""),
            created_at=data.get("created_at", ""),
            tags=list(data.get("tags", [])),
            specifications=dict(data.get("specifications", {})),
            is_active=data.get("is_active", True),
            views=data.get("views", 0),
            sales=data.get("sales", 0),
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "rating": self.rating,
            "stock": self.stock,
            "image_url": self.image_url,
            "created_at": self.created_at,
            "tags": list(self.tags),
            "specifications": dict(self.specifications),
            "is_active": self.is_active,
            "views": self.views,
            "sales": self.sales,
        }


PRODUCT_FIELDS = tuple(f.name for f in fields(Product))


def _apply_aliases(data: Mapping[str, Any]) -> Dict[str, Any]:
    result = {}
    for key, value in data.items():
        result[FIELD_ALIASES.get(key, key)] = value
    return result


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _to_number(value: Any) -> float:
    """Coerce to a finite number, 0 when that is impossible."""
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def normalize_product_fields(
    payload: Mapping[str, Any],
    default_image_url: str = ""
) -> Dict[str, Any]:
    """
    Coerce a create/edit payload into valid product fields.

    Only keys present in the payload are returned, so the result can be
    shallow-merged into an existing record.

    Args:
        payload: Raw field mapping (snake_case or camelCase keys)
        default_image_url: Used when an empty image URL is supplied

    Returns:
        Dict of normalized fields keyed by Product attribute name
    """
    normalized: Dict[str, Any] = {}

    for key, value in _apply_aliases(payload).items():
        if key not in PRODUCT_FIELDS:
            logger.debug(f"Dropping unknown product field: {key}")
            continue

        if key in ("name", "description", "category"):
            normalized[key] = str(value or "").strip()
        elif key == "image_url":
            normalized[key] = str(value or "").strip() or default_image_url
        elif key == "price":
            normalized[key] = max(0, _to_number(value))
        elif key == "rating":
            normalized[key] = min(5, max(0, _to_number(value)))
        elif key in ("stock", "views", "sales"):
            normalized[key] = max(0, int(_to_number(value)))
        elif key == "tags":
            if isinstance(value, str):
                value = value.split(",")
            normalized[key] = [str(tag).strip() for tag in (value or []) if str(tag).strip()]
        elif key == "specifications":
            specs = {}
            for spec_name, spec_value in dict(value or {}).items():
                spec_name = str(spec_name).strip()
                spec_value = str(spec_value).strip()
                if spec_name and spec_value:
                    specs[spec_name] = spec_value
            normalized[key] = specs
        elif key == "is_active":
            normalized[key] = bool(value)
        else:
            normalized[key] = value

    return normalized
