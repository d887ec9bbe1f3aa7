"""
Favorite data model.

Join between a user and a product they marked as favorite.
"""

from dataclasses import dataclass


@dataclass
class Favorite:
    id: str
    product_id: str
    user_id: str
    created_at: str = ""  # ISO-8601 UTC

    @classmethod
    def from_dict(cls, data: dict) -> "Favorite":
        """Create Favorite from JSON dict."""
        return cls(
            id=data["id"],
            product_id=data.get("product_id", data.get("productId")),
            user_id=data.get("user_id", data.get("userId")),
            created_at=data.get("created_at", data.get("createdAt", "")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "user_id": self.user_id,
            "created_at": self.created_at,
        }
