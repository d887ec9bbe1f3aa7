"""
Configuration settings for the Merchio catalog.

Centralized configuration for storage, listing defaults and reporting.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("CATALOG_DATA_ROOT", str(PROJECT_ROOT / "data")))
OUTPUT_ROOT = Path(os.getenv("CATALOG_OUTPUT_ROOT", str(PROJECT_ROOT / "output")))

# Storage namespaces (one persisted collection per key)
PRODUCTS_KEY = "merchio_products"
REVIEWS_KEY = "merchio_reviews"
FAVORITES_KEY = "merchio_favorites"

# Write the demo catalogue on the first read of an empty store
SEED_ON_FIRST_READ = True

# Listing
RELATED_PRODUCTS_LIMIT = 4

# Dashboard
DASHBOARD_TOP_N = 5

# Favorites are keyed by user; this id is used when the caller gives none
DEFAULT_USER_ID = "user1"

# Product form
DEFAULT_IMAGE_URL = (
    "https://images.unsplash.com/photo-1512436991641-6745cdb1723f"
    "?q=80&w=1200&auto=format&fit=crop"
)

# Logging
LOG_LEVEL = os.getenv("CATALOG_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
