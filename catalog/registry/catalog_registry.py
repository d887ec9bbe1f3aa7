"""
Catalog Registry - storage-backed product and review operations.

Every operation reads the full collection from storage, computes, and
writes the full collection back as one unit.
"""

import logging
import uuid
from typing import Any, Callable, List, Mapping, Optional, Sequence

import pandas as pd

from catalog.engine import listing
from catalog.engine.stats import CatalogStats, build_comparison_table, compute_stats, mean_rating
from catalog.models.product import SYSTEM_FIELDS, Product, normalize_product_fields
from catalog.models.query import ListResult, ProductQuery
from catalog.models.review import Review
from catalog.utils.storage import read_collection, write_collection
from catalog.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)


class CatalogRegistry:
    """
    Single source of truth for products and their reviews.

    Owns:
    - Listing over the persisted snapshot (filter, sort, paginate)
    - Product create/edit/delete and view recording
    - Review attachment, including recomputing the product rating
    """

    def __init__(
        self,
        storage,
        products_key: str = "merchio_products",
        reviews_key: str = "merchio_reviews",
        seed_factory: Optional[Callable[[], List[Product]]] = None,
        default_image_url: str = ""
    ):
        """
        Initialize registry over a storage backend.

        Args:
            storage: Any object with read(key) and write(key, value)
            products_key: Storage namespace for products
            reviews_key: Storage namespace for reviews
            seed_factory: Builds the catalogue written on first read of an empty store
            default_image_url: Image used when a product is saved without one
        """
        self.storage = storage
        self.products_key = products_key
        self.reviews_key = reviews_key
        self.seed_factory = seed_factory
        self.default_image_url = default_image_url

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def all_products(self) -> List[Product]:
        """Return the whole product collection in stored order."""
        products = read_collection(self.storage, self.products_key, Product.from_dict)

        if products is None:
            if self.seed_factory is None:
                return []
            products = self.seed_factory()
            self._save_products(products)
            logger.info(f"Seeded empty catalog with {len(products)} products")

        return products

    def _save_products(self, products: Sequence[Product]) -> None:
        write_collection(self.storage, self.products_key, products)

    def _all_reviews(self) -> List[Review]:
        return read_collection(self.storage, self.reviews_key, Review.from_dict) or []

    def _save_reviews(self, reviews: Sequence[Review]) -> None:
        write_collection(self.storage, self.reviews_key, reviews)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, query: Optional[ProductQuery] = None) -> ListResult:
        return listing.list_products(self.all_products(), query or ProductQuery())

    def list_categories(self) -> List[str]:
        return listing.list_categories(self.all_products())

    def peek(self, product_id: str) -> Optional[Product]:
        """Retrieve product by ID without recording a view. Returns None if not found."""
        for product in self.all_products():
            if product.id == product_id:
                return product
        return None

    def fetch_and_record_view(self, product_id: str) -> Optional[Product]:
        """
        Retrieve a product for display and count the view.

        Each successful call increments views by exactly 1 and persists
        the change before returning.

        Args:
            product_id: Target product ID

        Returns:
            The product with its updated view count, or None if not found
        """
        products = self.all_products()
        for product in products:
            if product.id == product_id:
                product.views += 1
                self._save_products(products)
                logger.debug(f"Recorded view for {product_id} (views={product.views})")
                return product

        logger.debug(f"Product not found: {product_id}")
        return None

    get = fetch_and_record_view

    def related_products(self, product_id: str, limit: int = 4) -> List[Product]:
        """
        Products from the same category, best rated first.

        Reading the subject does not count as a view.
        """
        products = self.all_products()
        subject = next((p for p in products if p.id == product_id), None)
        if subject is None:
            return []
        return listing.related_products(products, subject, limit)

    def compare(self, product_ids: Sequence[str]) -> pd.DataFrame:
        """Comparison table for the given products; unknown IDs are skipped."""
        by_id = {p.id: p for p in self.all_products()}
        products = [by_id[pid] for pid in product_ids if pid in by_id]
        return build_comparison_table(products)

    def get_reviews(self, product_id: Optional[str] = None) -> List[Review]:
        """All reviews, or one product's, in insertion order."""
        reviews = self._all_reviews()
        if product_id is None:
            return reviews
        return [r for r in reviews if r.product_id == product_id]

    def stats(self) -> CatalogStats:
        return compute_stats(self.all_products(), self._all_reviews())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def upsert(self, fields: Mapping[str, Any]) -> Optional[Product]:
        """
        Create a product, or merge fields into an existing one.

        With an "id" that matches, provided fields replace the stored ones and
        everything else is kept; id, created_at, views and sales never change
        on this path. With an unknown "id" nothing is written. Without an
        "id" a new product is inserted at the front of the collection.

        Args:
            fields: Partial product fields (snake_case or camelCase)

        Returns:
            The stored product, or None when the id matched nothing
        """
        product_id = fields.get("id")
        changes = normalize_product_fields(fields, self.default_image_url)
        for key in SYSTEM_FIELDS:
            changes.pop(key, None)

        products = self.all_products()

        if product_id:
            for index, existing in enumerate(products):
                if existing.id == product_id:
                    merged = existing.to_dict()
                    merged.update(changes)
                    products[index] = Product.from_dict(merged)
                    self._save_products(products)
                    logger.info(f"Updated product {product_id}: {sorted(changes)}")
                    return products[index]

            logger.warning(f"Cannot update unknown product {product_id}, ignoring")
            return None

        changes.setdefault("name", "")
        changes.setdefault("image_url", self.default_image_url)
        created = Product(
            id=str(uuid.uuid4()),
            created_at=utc_now_iso(),
            views=0,
            sales=0,
            **changes
        )
        products.insert(0, created)
        self._save_products(products)
        logger.info(f"Created product {created.id} - '{created.name}'")
        return created

    def remove(self, product_id: str) -> bool:
        """
        Hard-delete a product.

        Idempotent: removing an unknown ID is a no-op.

        Returns:
            True if a product was removed
        """
        products = self.all_products()
        remaining = [p for p in products if p.id != product_id]

        if len(remaining) == len(products):
            logger.debug(f"Nothing to remove for {product_id}")
            return False

        self._save_products(remaining)
        logger.info(f"Removed product {product_id}")
        return True

    def attach_review(
        self,
        product_id: str,
        user_name: str,
        rating: int,
        comment: str = ""
    ) -> Review:
        """
        Store a review and recompute the product's rating.

        The product rating becomes the mean of all its review ratings,
        rounded to one decimal with halves rounded up. This overwrites any
        rating set by hand through upsert.

        Args:
            product_id: Product being reviewed
            user_name: Author display name
            rating: 1-5 star rating
            comment: Free-text comment

        Returns:
            The stored review

        Raises:
            ValueError: If rating is outside 1-5
        """
        review = Review(
            id=str(uuid.uuid4()),
            product_id=product_id,
            user_name=user_name,
            rating=rating,
            comment=comment,
            created_at=utc_now_iso(),
            helpful=0
        )

        reviews = self._all_reviews()
        reviews.append(review)
        self._save_reviews(reviews)

        products = self.all_products()
        product = next((p for p in products if p.id == product_id), None)
        if product is None:
            logger.warning(f"Review {review.id} stored for unknown product {product_id}")
            return review

        product.rating = mean_rating([r.rating for r in reviews if r.product_id == product_id])
        self._save_products(products)

        logger.info(f"Added review {review.id} to {product_id} (rating now {product.rating})")
        return review

    def vote_helpful(self, review_id: str) -> bool:
        """
        Increment a review's helpful count by one.

        Returns:
            True if the review exists
        """
        reviews = self._all_reviews()
        for review in reviews:
            if review.id == review_id:
                review.helpful += 1
                self._save_reviews(reviews)
                logger.debug(f"Review {review_id} helpful={review.helpful}")
                return True

        logger.debug(f"Review not found: {review_id}")
        return False


# Design Rationale and Trade-offs:
#
# 1. Every operation reads the whole collection and writes it back
#    - The storage port only offers read(key) and write(key, value)
#    - Trade-off: O(n) per mutation and last writer wins across processes
#
# 2. Only fetch_and_record_view (get) increments views
#    - peek, related_products, compare, upsert and stats are side-effect free
#    - Trade-off: callers must pick the right read
#
# 3. Unknown ids are logged no-ops, not exceptions
#    - upsert returns None; remove and vote_helpful return False
#    - Trade-off: a typo in an id is only visible in the logs and return value
#
# 4. A review for an unknown product is still stored
#    - No rating is written and a warning is logged
#    - Trade-off: orphan reviews stay in the reviews collection
