"""
Review data model.

Represents shopper feedback attached to a single product.
"""

from dataclasses import dataclass


@dataclass
class Review:
    """
    Feedback on one product.
    Many reviews may exist per product, including several by the same author.
    """
    id: str
    product_id: str
    user_name: str
    rating: int  # 1-5 star rating
    comment: str = ""
    created_at: str = ""  # ISO-8601 UTC
    helpful: int = 0  # Helpful votes, only ever incremented

    def __post_init__(self):
        for name in ("id", "product_id", "user_name", "comment", "created_at"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"Invalid {name}: {getattr(self, name)!r}. Must be a string")

        # Validate rating
        if isinstance(self.rating, bool) or not isinstance(self.rating, (int, float)) or not (1 <= self.rating <= 5):
            raise ValueError(f"Invalid rating: {self.rating}. Must be 1-5")
        if isinstance(self.helpful, bool) or not isinstance(self.helpful, int) or self.helpful < 0:
            raise ValueError(f"Invalid helpful count: {self.helpful}. Must be >= 0")

    @classmethod
    def from_dict(cls, data: dict) -> "Review":
        """Create Review from JSON dict."""
        return cls(
            id=data["id"],
            product_id=data.get("product_id", data.get("productId")),
            user_name=data.get("user_name", data.get("userName", "")),
            rating=data["rating"],
            comment=data.get("comment", ""),
            created_at=data.get("created_at", data.get("createdAt", "")),
            helpful=data.get("helpful", 0),
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "product_id": self.product_id,
            "user_name": self.user_name,
            "rating": self.rating,
            "comment": self.comment,
            "created_at": self.created_at,
            "helpful": self.helpful,
        }
