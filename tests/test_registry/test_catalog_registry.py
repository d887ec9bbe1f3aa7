"""
Unit tests for Catalog Registry.
Verifies storage-backed product and review operations.
"""

import json
import os
import tempfile

import pytest
from catalog.models.query import ProductQuery
from catalog.registry.catalog_registry import CatalogRegistry
from catalog.utils.seed import SEED_PRODUCTS, build_seed_products
from catalog.utils.storage import InMemoryStorage, StorageManager

PRODUCTS_KEY = "merchio_products"
REVIEWS_KEY = "merchio_reviews"


@pytest.fixture
def registry():
    """Empty registry over in-memory storage."""
    return CatalogRegistry(InMemoryStorage(), default_image_url="https://example.com/default.jpg")


def create(registry, name, **fields):
    payload = {"name": name, "price": 1000, "category": "Apparel", "stock": 10}
    payload.update(fields)
    return registry.upsert(payload)


def test_create_assigns_system_fields(registry):
    """Test new products get id, timestamp and zeroed counters."""
    product = create(registry, "Basic Tee", views=99, sales=7)

    assert product.id
    assert product.created_at
    assert product.views == 0
    assert product.sales == 0
    assert product.image_url == "https://example.com/default.jpg"
    assert registry.peek(product.id) == product


def test_create_inserts_at_front(registry):
    first = create(registry, "First")
    second = create(registry, "Second")

    assert [p.id for p in registry.all_products()] == [second.id, first.id]


def test_get_records_exactly_one_view_per_call(registry):
    product = create(registry, "Basic Tee")

    views = [registry.get(product.id).views for _ in range(3)]

    assert views == [1, 2, 3]
    assert registry.peek(product.id).views == 3


def test_peek_does_not_record_view(registry):
    product = create(registry, "Basic Tee")

    registry.peek(product.id)
    registry.peek(product.id)

    assert registry.peek(product.id).views == 0


def test_get_unknown_returns_none(registry):
    assert registry.get("missing") is None
    assert registry.peek("missing") is None


def test_upsert_merges_and_preserves_system_fields(registry):
    """Test edit replaces given fields only; id, created_at, views, sales never change."""
    product = create(registry, "Basic Tee", description="Soft cotton", tags="cotton, basic")
    registry.get(product.id)

    updated = registry.upsert({
        "id": product.id,
        "price": 2500,
        "stock": 3,
        "views": 0,
        "sales": 100,
        "created_at": "1999-01-01T00:00:00+00:00",
    })

    assert updated.price == 2500
    assert updated.stock == 3
    assert updated.name == "Basic Tee"
    assert updated.description == "Soft cotton"
    assert updated.tags == ["cotton", "basic"]
    assert updated.id == product.id
    assert updated.created_at == product.created_at
    assert updated.views == 1
    assert updated.sales == 0


def test_upsert_then_get_reflects_fields(registry):
    product = create(registry, "Basic Tee")
    registry.upsert({"id": product.id, "name": "Tee v2", "rating": 4.4, "isActive": False})

    fetched = registry.get(product.id)

    assert fetched.name == "Tee v2"
    assert fetched.rating == 4.4
    assert fetched.is_active is False
    assert fetched.views == 1
    assert fetched.created_at == product.created_at


def test_upsert_unknown_id_is_noop(registry):
    create(registry, "Basic Tee")

    assert registry.upsert({"id": "missing", "name": "Ghost"}) is None
    assert len(registry.all_products()) == 1


def test_remove(registry):
    product = create(registry, "Basic Tee")
    create(registry, "Canvas Tote")

    assert registry.remove(product.id) is True
    assert registry.peek(product.id) is None
    assert len(registry.all_products()) == 1


def test_remove_unknown_is_noop(registry):
    create(registry, "Basic Tee")

    assert registry.remove("missing") is False
    assert len(registry.all_products()) == 1


def test_list_and_categories(registry):
    create(registry, "Basic Tee", category="Apparel", stock=0)
    create(registry, "Canvas Tote", category="Bags", stock=4)

    result = registry.list(ProductQuery(stock_filter="lowStock"))

    assert [p.name for p in result.items] == ["Canvas Tote"]
    assert registry.list().total == 2
    assert registry.list_categories() == ["all", "Bags", "Apparel"]


def test_attach_review_recomputes_rating(registry):
    """Reviews [4, 5] give 4.5; adding a 3 gives 4.0."""
    product = create(registry, "Basic Tee", rating=1)

    review = registry.attach_review(product.id, "Lan", 4, "Nice")
    assert review.helpful == 0
    assert review.created_at
    registry.attach_review(product.id, "Minh", 5)
    assert registry.peek(product.id).rating == 4.5

    registry.attach_review(product.id, "Hoa", 3)
    assert registry.peek(product.id).rating == 4.0


def test_review_overwrites_manual_rating(registry):
    product = create(registry, "Basic Tee")
    registry.attach_review(product.id, "Lan", 2)

    registry.upsert({"id": product.id, "rating": 5})
    assert registry.peek(product.id).rating == 5

    registry.attach_review(product.id, "Minh", 3)
    assert registry.peek(product.id).rating == 2.5


def test_reviews_only_count_their_product(registry):
    tee = create(registry, "Basic Tee")
    tote = create(registry, "Canvas Tote")

    registry.attach_review(tee.id, "Lan", 5)
    registry.attach_review(tote.id, "Lan", 1)

    assert registry.peek(tee.id).rating == 5.0
    assert registry.peek(tote.id).rating == 1.0
    assert [r.product_id for r in registry.get_reviews(tee.id)] == [tee.id]
    assert len(registry.get_reviews()) == 2


def test_attach_review_rejects_invalid_rating(registry):
    product = create(registry, "Basic Tee")

    with pytest.raises(ValueError):
        registry.attach_review(product.id, "Lan", 6)

    assert registry.get_reviews() == []


def test_review_for_unknown_product_is_stored(registry):
    review = registry.attach_review("missing", "Lan", 4)

    assert registry.get_reviews("missing") == [review]
    assert registry.all_products() == []


def test_vote_helpful(registry):
    product = create(registry, "Basic Tee")
    review = registry.attach_review(product.id, "Lan", 4)

    assert registry.vote_helpful(review.id) is True
    assert registry.vote_helpful(review.id) is True
    assert registry.get_reviews(product.id)[0].helpful == 2

    assert registry.vote_helpful("missing") is False


def test_related_products_excludes_subject_and_records_no_view(registry):
    subject = create(registry, "Basic Tee", category="Apparel", rating=5)
    shirt = create(registry, "Linen Shirt", category="Apparel", rating=4)
    create(registry, "Canvas Tote", category="Bags", rating=5)

    related = registry.related_products(subject.id)

    assert [p.id for p in related] == [shirt.id]
    assert registry.peek(subject.id).views == 0
    assert registry.related_products("missing") == []


def test_compare_skips_unknown_ids(registry):
    tee = create(registry, "Basic Tee", specifications={"Material": "Cotton"})
    tote = create(registry, "Canvas Tote")

    table = registry.compare([tote.id, "missing", tee.id])

    assert list(table.columns) == ["Canvas Tote", "Basic Tee"]
    assert registry.peek(tee.id).views == 0


def test_stats(registry):
    tee = create(registry, "Basic Tee", stock=0)
    create(registry, "Canvas Tote", category="Bags", stock=50)
    registry.attach_review(tee.id, "Lan", 4)
    registry.attach_review(tee.id, "Minh", 5)

    stats = registry.stats()

    assert stats.total_products == 2
    assert stats.total_categories == 2
    assert stats.total_reviews == 2
    assert stats.average_rating == 4.5
    assert stats.low_stock_products == 1
    assert stats.out_of_stock_products == 1


def test_seed_on_first_read():
    """Test the demo catalogue is written once when the store is empty."""
    storage = InMemoryStorage()
    registry = CatalogRegistry(storage, seed_factory=build_seed_products)

    products = registry.all_products()

    assert [p.name for p in products] == [s["name"] for s in SEED_PRODUCTS]
    assert PRODUCTS_KEY in storage.values
    assert [p.id for p in registry.all_products()] == [p.id for p in products]


def test_seeded_store_stays_empty_after_deletes():
    registry = CatalogRegistry(InMemoryStorage(), seed_factory=build_seed_products)
    for product in registry.all_products():
        registry.remove(product.id)

    assert registry.all_products() == []


def test_corrupted_products_read_as_empty():
    """Test unparsable data degrades to an empty catalog and is not reseeded."""
    storage = InMemoryStorage({PRODUCTS_KEY: "{not json"})
    registry = CatalogRegistry(storage, seed_factory=build_seed_products)

    assert registry.all_products() == []
    assert registry.list().total == 0
    assert registry.get("anything") is None
    assert registry.remove("anything") is False


def test_corrupted_reviews_read_as_empty():
    storage = InMemoryStorage({REVIEWS_KEY: json.dumps({"not": "a list"})})
    registry = CatalogRegistry(storage)

    assert registry.get_reviews() == []
    assert registry.vote_helpful("anything") is False


def test_invalid_records_are_skipped():
    good = {"id": "p-1", "name": "Basic Tee", "price": 1000, "stock": 3}
    storage = InMemoryStorage({
        PRODUCTS_KEY: json.dumps([good, {"id": "p-2", "name": "Bad", "price": -5}, {"name": "No id"}, "junk"])
    })
    registry = CatalogRegistry(storage)

    assert [p.id for p in registry.all_products()] == ["p-1"]


def test_wrong_typed_records_are_skipped():
    """Test records with fields of the wrong type never reach filtering or sorting."""
    good = {"id": "p-1", "name": "Basic Tee", "description": "Soft", "tags": ["basic"]}
    storage = InMemoryStorage({PRODUCTS_KEY: json.dumps([
        {"id": "a", "name": "A", "created_at": 123},
        {"id": "b", "name": None},
        {"id": "c", "name": "C", "description": 7},
        {"id": "d", "name": "D", "tags": [1, 2]},
        {"id": "e", "name": "E", "price": "10"},
        {"id": "f", "name": "F", "stock": True},
        {"id": "g", "name": "G", "rating": None},
        good,
    ])})
    registry = CatalogRegistry(storage)

    assert [p.id for p in registry.list().items] == ["p-1"]
    assert [p.id for p in registry.list(ProductQuery(text="b")).items] == ["p-1"]
    assert [p.id for p in registry.list(ProductQuery(sort_by="name", sort_order="asc")).items] == ["p-1"]


def test_undecodable_products_read_as_empty():
    """Test a products file that is not UTF-8 degrades to an empty catalog."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with open(os.path.join(tmpdir, f"{PRODUCTS_KEY}.json"), "wb") as f:
            f.write(b"\xff\xfe\x00garbage")

        registry = CatalogRegistry(StorageManager(tmpdir))

        assert registry.list().total == 0
        assert registry.stats().total_products == 0
        assert create(registry, "Basic Tee").name == "Basic Tee"


def test_corrupted_products_restored_from_backup():
    """Test a corrupted products file falls back to the previous write."""
    with tempfile.TemporaryDirectory() as tmpdir:
        registry = CatalogRegistry(StorageManager(tmpdir))
        first = create(registry, "Basic Tee")
        create(registry, "Canvas Tote")

        with open(os.path.join(tmpdir, f"{PRODUCTS_KEY}.json"), "w") as f:
            f.write('[{"id": ')

        restored = CatalogRegistry(StorageManager(tmpdir))

        assert [p.id for p in restored.all_products()] == [first.id]
        assert restored.get(first.id).views == 1


def test_persists_through_storage_manager():
    """Test a second registry on the same directory sees earlier writes."""
    with tempfile.TemporaryDirectory() as tmpdir:
        registry1 = CatalogRegistry(StorageManager(tmpdir))
        product = create(registry1, "Basic Tee")
        registry1.get(product.id)

        registry2 = CatalogRegistry(StorageManager(tmpdir))

        assert registry2.peek(product.id).views == 1
        assert os.path.exists(os.path.join(tmpdir, f"{PRODUCTS_KEY}.json"))


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
