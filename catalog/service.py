"""
Catalog Service.

Wires storage, registries and reporting together from settings.
"""

import logging
from typing import Optional

from catalog.engine.stats import DashboardReporter
from catalog.registry.catalog_registry import CatalogRegistry
from catalog.registry.favorites import FavoritesRegistry
from catalog.utils.seed import build_seed_products
from catalog.utils.storage import StorageManager
import config.settings as settings

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Entry point used by the CLI and any presentation layer.

    Exposes:
    - catalog: product listing, editing, reviews
    - favorites: per-user favorites
    - reporter: dashboard CSV export
    """

    def __init__(self, data_root: str, storage=None, seed: Optional[bool] = None):
        """
        Initialize catalog service.

        Args:
            data_root: Root directory for persisted collections
            storage: Storage backend; defaults to a StorageManager on data_root
            seed: Seed an empty store with the demo catalogue (default from settings)
        """
        self.data_root = data_root
        self.storage = storage if storage is not None else StorageManager(data_root)

        if seed is None:
            seed = settings.SEED_ON_FIRST_READ

        self.catalog = CatalogRegistry(
            self.storage,
            products_key=settings.PRODUCTS_KEY,
            reviews_key=settings.REVIEWS_KEY,
            seed_factory=build_seed_products if seed else None,
            default_image_url=settings.DEFAULT_IMAGE_URL
        )
        self.favorites = FavoritesRegistry(
            self.storage,
            favorites_key=settings.FAVORITES_KEY
        )
        self.reporter = DashboardReporter(
            registry=self.catalog,
            top_n=settings.DASHBOARD_TOP_N
        )

        logger.info("Catalog service initialized")
