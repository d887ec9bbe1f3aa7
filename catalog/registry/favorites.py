"""
Favorites Registry - per-user favorite products.

The user is always passed explicitly; there is no implicit current user.
"""

import logging
import uuid
from typing import List, Set

from catalog.models.favorite import Favorite
from catalog.utils.storage import read_collection, write_collection
from catalog.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)


class FavoritesRegistry:
    """
    Tracks which products each user marked as favorite.
    At most one Favorite exists per (user, product) pair.
    """

    def __init__(self, storage, favorites_key: str = "merchio_favorites"):
        self.storage = storage
        self.favorites_key = favorites_key

    def _all(self) -> List[Favorite]:
        return read_collection(self.storage, self.favorites_key, Favorite.from_dict) or []

    def _save(self, favorites: List[Favorite]) -> None:
        write_collection(self.storage, self.favorites_key, favorites)

    def list(self, user_id: str) -> List[Favorite]:
        """Favorites of one user, oldest first."""
        return [f for f in self._all() if f.user_id == user_id]

    def favorite_ids(self, user_id: str) -> Set[str]:
        return {f.product_id for f in self.list(user_id)}

    def is_favorite(self, user_id: str, product_id: str) -> bool:
        return product_id in self.favorite_ids(user_id)

    def add(self, user_id: str, product_id: str) -> Favorite:
        """
        Mark a product as favorite.
        Idempotent: returns the existing Favorite if already marked.
        """
        favorites = self._all()
        for favorite in favorites:
            if favorite.user_id == user_id and favorite.product_id == product_id:
                return favorite

        favorite = Favorite(
            id=str(uuid.uuid4()),
            product_id=product_id,
            user_id=user_id,
            created_at=utc_now_iso()
        )
        favorites.append(favorite)
        self._save(favorites)
        logger.info(f"User {user_id} favorited {product_id}")
        return favorite

    def remove(self, user_id: str, product_id: str) -> bool:
        """Unmark a product. Returns True if a favorite was removed."""
        favorites = self._all()
        remaining = [
            f for f in favorites
            if not (f.user_id == user_id and f.product_id == product_id)
        ]
        if len(remaining) == len(favorites):
            return False

        self._save(remaining)
        logger.info(f"User {user_id} unfavorited {product_id}")
        return True

    def toggle(self, user_id: str, product_id: str) -> bool:
        """
        Flip the favorite state of a product for a user.

        Returns:
            True if the product is a favorite after the call
        """
        if self.remove(user_id, product_id):
            return False
        self.add(user_id, product_id)
        return True
