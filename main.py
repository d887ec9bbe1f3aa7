"""
Merchio Catalog - admin CLI.

Command-line entry point over the catalog service.
"""

import argparse
import json
import logging
import sys

from catalog.models.query import DEFAULT_PAGE_SIZE, ProductQuery, SortKey, SortOrder, StockFilter
from catalog.service import CatalogService
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler("catalog.log")
        ]
    )


def emit(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Merchio - product catalog administration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Second page of in-stock apparel, cheapest first
  python main.py list --category Apparel --stock-filter inStock \\
                      --sort-by price --sort-order asc --page 2

  # Create a product
  python main.py upsert '{"name": "Linen Shirt", "price": 349000, "category": "Apparel", "stock": 12}'

  # Review a product and export the dashboard
  python main.py review <product-id> --user "Lan" --rating 5 --comment "Great fit"
  python main.py report
        """
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List products")
    list_cmd.add_argument("--text", help="Search in name, description and tags")
    list_cmd.add_argument("--category", default="all")
    list_cmd.add_argument("--min-price")
    list_cmd.add_argument("--max-price")
    list_cmd.add_argument("--min-rating")
    list_cmd.add_argument(
        "--stock-filter",
        default=StockFilter.ALL.value,
        choices=[f.value for f in StockFilter]
    )
    list_cmd.add_argument(
        "--sort-by",
        default=SortKey.CREATED_AT.value,
        choices=[k.value for k in SortKey]
    )
    list_cmd.add_argument(
        "--sort-order",
        default=SortOrder.DESC.value,
        choices=[o.value for o in SortOrder]
    )
    list_cmd.add_argument("--page", default=1)
    list_cmd.add_argument("--page-size", default=DEFAULT_PAGE_SIZE)

    show_cmd = commands.add_parser("show", help="Show a product (records a view)")
    show_cmd.add_argument("product_id")

    commands.add_parser("categories", help="List categories")

    related_cmd = commands.add_parser("related", help="Related products")
    related_cmd.add_argument("product_id")
    related_cmd.add_argument("--limit", type=int, default=settings.RELATED_PRODUCTS_LIMIT)

    upsert_cmd = commands.add_parser("upsert", help="Create or edit a product from JSON")
    upsert_cmd.add_argument("payload", help="JSON object of product fields; include id to edit")

    delete_cmd = commands.add_parser("delete", help="Delete a product")
    delete_cmd.add_argument("product_id")

    review_cmd = commands.add_parser("review", help="Review a product")
    review_cmd.add_argument("product_id")
    review_cmd.add_argument("--user", required=True, help="Author display name")
    review_cmd.add_argument("--rating", type=int, required=True, choices=range(1, 6))
    review_cmd.add_argument("--comment", default="")

    reviews_cmd = commands.add_parser("reviews", help="List reviews")
    reviews_cmd.add_argument("product_id", nargs="?")

    helpful_cmd = commands.add_parser("helpful", help="Vote a review helpful")
    helpful_cmd.add_argument("review_id")

    favorite_cmd = commands.add_parser("favorite", help="Toggle a favorite")
    favorite_cmd.add_argument("product_id")
    favorite_cmd.add_argument("--user", default=settings.DEFAULT_USER_ID)

    favorites_cmd = commands.add_parser("favorites", help="List favorites")
    favorites_cmd.add_argument("--user", default=settings.DEFAULT_USER_ID)

    compare_cmd = commands.add_parser("compare", help="Compare products side by side")
    compare_cmd.add_argument("product_ids", nargs="+")

    commands.add_parser("stats", help="Catalog statistics")

    report_cmd = commands.add_parser("report", help="Export dashboard CSV")
    report_cmd.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )

    return parser


def run_command(service: CatalogService, args: argparse.Namespace) -> int:
    """Execute one subcommand. Returns the process exit code."""
    catalog = service.catalog

    if args.command == "list":
        query = ProductQuery(
            text=args.text,
            category=args.category,
            min_price=args.min_price,
            max_price=args.max_price,
            min_rating=args.min_rating,
            stock_filter=args.stock_filter,
            sort_by=args.sort_by,
            sort_order=args.sort_order,
            page=args.page,
            page_size=args.page_size
        )
        emit(catalog.list(query).to_dict())

    elif args.command == "show":
        product = catalog.get(args.product_id)
        if product is None:
            emit({"error": f"Product not found: {args.product_id}"})
            return 1
        emit(product.to_dict())

    elif args.command == "categories":
        emit(catalog.list_categories())

    elif args.command == "related":
        emit([p.to_dict() for p in catalog.related_products(args.product_id, args.limit)])

    elif args.command == "upsert":
        product = catalog.upsert(json.loads(args.payload))
        if product is None:
            emit({"error": "Product not found"})
            return 1
        emit(product.to_dict())

    elif args.command == "delete":
        emit({"removed": catalog.remove(args.product_id)})

    elif args.command == "review":
        review = catalog.attach_review(args.product_id, args.user, args.rating, args.comment)
        emit(review.to_dict())

    elif args.command == "reviews":
        emit([r.to_dict() for r in catalog.get_reviews(args.product_id)])

    elif args.command == "helpful":
        emit({"updated": catalog.vote_helpful(args.review_id)})

    elif args.command == "favorite":
        emit({"product_id": args.product_id, "favorite": service.favorites.toggle(args.user, args.product_id)})

    elif args.command == "favorites":
        emit([f.to_dict() for f in service.favorites.list(args.user)])

    elif args.command == "compare":
        print(catalog.compare(args.product_ids).to_string())

    elif args.command == "stats":
        emit(catalog.stats().to_dict())

    elif args.command == "report":
        emit({"report": service.reporter.generate(args.output_dir)})

    return 0


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        service = CatalogService(data_root=args.data_root)
        sys.exit(run_command(service, args))

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}", exc_info=True)
        print(f"\n❌ Command failed: {e}", file=sys.stderr)
        print("Check catalog.log for details", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
