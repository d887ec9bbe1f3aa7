"""
Catalog aggregates and dashboard reporting.

Pure aggregation over product and review snapshots, plus the pandas-backed
comparison table and dashboard CSV export.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Sequence

import pandas as pd

from catalog.engine.listing import LOW_STOCK_THRESHOLD
from catalog.models.product import Product
from catalog.models.review import Review
from catalog.utils.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

COMPARISON_FEATURES = ["name", "price", "rating", "stock", "category", "views", "sales"]
MISSING_VALUE = "-"


@dataclass
class CatalogStats:
    total_products: int = 0
    total_categories: int = 0
    total_reviews: int = 0
    average_rating: float = 0.0
    total_views: int = 0
    total_sales: int = 0
    low_stock_products: int = 0
    out_of_stock_products: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def mean_rating(ratings: Sequence[int]) -> float:
    """
    Mean of review ratings rounded to one decimal, halves away from zero.

    Uses exact decimal arithmetic so 4.05 rounds to 4.1, not 4.0.
    """
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def compute_stats(products: Sequence[Product], reviews: Sequence[Review]) -> CatalogStats:
    """
    Aggregate counts over the catalog.

    Low stock counts every product under the threshold, including ones
    that are out of stock.
    """
    average = sum(r.rating for r in reviews) / len(reviews) if reviews else 0.0

    return CatalogStats(
        total_products=len(products),
        total_categories=len({p.category for p in products}),
        total_reviews=len(reviews),
        average_rating=average,
        total_views=sum(p.views for p in products),
        total_sales=sum(p.sales for p in products),
        low_stock_products=len(low_stock(products)),
        out_of_stock_products=len(out_of_stock(products)),
    )


def top_products(products: Sequence[Product], limit: int = 5) -> List[Product]:
    """Most viewed products first."""
    return sorted(products, key=lambda p: p.views, reverse=True)[:limit]


def low_stock(products: Sequence[Product]) -> List[Product]:
    return [p for p in products if p.stock < LOW_STOCK_THRESHOLD]


def out_of_stock(products: Sequence[Product]) -> List[Product]:
    return [p for p in products if p.stock == 0]


def recent_reviews(reviews: Sequence[Review], limit: int = 5) -> List[Review]:
    """Newest reviews first."""
    return sorted(reviews, key=lambda r: parse_timestamp(r.created_at), reverse=True)[:limit]


def stock_status(product: Product) -> str:
    if product.stock == 0:
        return "out_of_stock"
    if product.stock < LOW_STOCK_THRESHOLD:
        return "low_stock"
    return "in_stock"


def build_comparison_table(products: Sequence[Product]) -> pd.DataFrame:
    """
    Side-by-side comparison of products.

    One column per product (labelled by name), one row per feature followed
    by one row per specification key in first-seen order. Missing
    specifications are shown as "-".

    Args:
        products: Products to compare, in display order

    Returns:
        DataFrame indexed by feature / specification name
    """
    spec_keys: List[str] = []
    for product in products:
        for key in product.specifications:
            if key not in spec_keys:
                spec_keys.append(key)

    columns: Dict[str, list] = {}
    for product in products:
        column = [getattr(product, feature) for feature in COMPARISON_FEATURES]
        column += [product.specifications.get(key, MISSING_VALUE) for key in spec_keys]

        label = product.name
        if label in columns:
            label = f"{product.name} ({product.id[:8]})"
        columns[label] = column

    return pd.DataFrame(columns, index=COMPARISON_FEATURES + spec_keys)


class DashboardReporter:
    """
    Writes the admin dashboard as a CSV table plus a metadata JSON file.
    """

    def __init__(self, registry, top_n: int = 5):
        """
        Initialize dashboard reporter.

        Args:
            registry: CatalogRegistry providing product and review snapshots
            top_n: Number of entries in the top-products and recent-reviews lists
        """
        self.registry = registry
        self.top_n = top_n

    def generate(self, output_dir: str = "output") -> str:
        """
        Generate the dashboard report for today.

        Args:
            output_dir: Directory to save CSV output

        Returns:
            Path to generated CSV file
        """
        products = self.registry.all_products()
        reviews = self.registry.get_reviews()
        stats = compute_stats(products, reviews)
        report_date = datetime.now(timezone.utc).strftime("%Y-%m-%d")

        logger.info(f"Generating dashboard report for {report_date} ({len(products)} products)")

        rows = [
            {
                "ID": p.id,
                "Name": p.name,
                "Category": p.category,
                "Price": p.price,
                "Stock": p.stock,
                "Status": stock_status(p),
                "Rating": p.rating,
                "Views": p.views,
                "Sales": p.sales,
                "Active": p.is_active,
            }
            for p in products
        ]

        df = pd.DataFrame(rows)

        if df.empty:
            logger.warning("No products found, creating empty dashboard table")
            df = pd.DataFrame(columns=[
                "ID", "Name", "Category", "Price", "Stock",
                "Status", "Rating", "Views", "Sales", "Active"
            ])
        else:
            # Most viewed first; stable so equal views keep catalog order
            df = df.sort_values("Views", ascending=False, kind="mergesort")

        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, f"dashboard_{report_date}.csv")
        df.to_csv(output_path, index=False)

        logger.info(f"Dashboard table saved to {output_path} ({len(df)} products)")

        metadata_path = os.path.join(output_dir, f"dashboard_{report_date}_metadata.json")
        metadata = {
            "report_date": report_date,
            "stats": stats.to_dict(),
            "top_products": [
                {"id": p.id, "name": p.name, "views": p.views}
                for p in top_products(products, self.top_n)
            ],
            "low_stock_product_ids": [p.id for p in low_stock(products)],
            "out_of_stock_product_ids": [p.id for p in out_of_stock(products)],
            "recent_reviews": [r.to_dict() for r in recent_reviews(reviews, self.top_n)],
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }

        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, ensure_ascii=False)

        logger.info(f"Metadata saved to {metadata_path}")

        return output_path


# Design Rationale and Trade-offs:
#
# 1. Mean rating uses Decimal with ROUND_HALF_UP
#    - 81/20 rounds to 4.1, not to the float-error 4.0
#    - Trade-off: slower than round(), irrelevant at catalog sizes
#
# 2. Dashboard helpers return lists; only the comparison and report use pandas
#    - Registry callers get Product/Review objects back
#    - DataFrames exist only where a table or CSV is the output
#    - Trade-off: two result shapes across this module
#
# 3. DashboardReporter writes a dated CSV plus a metadata JSON sidecar
#    - Reruns on the same day overwrite that day's files
#    - Trade-off: no history within a day
