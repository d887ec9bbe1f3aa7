"""
Unit tests for the Product, Review and Favorite models.
"""

import pytest
from catalog.models.favorite import Favorite
from catalog.models.product import Product, normalize_product_fields
from catalog.models.review import Review


def test_product_validation():
    """Test Product invariants on construction."""
    product = Product(id="p-1", name="Mug", price=0, rating=5, stock=0)
    assert product.rating == 5

    with pytest.raises(ValueError):
        Product(id="p-1", name="Mug", price=-1)

    with pytest.raises(ValueError):
        Product(id="p-1", name="Mug", rating=5.1)

    with pytest.raises(ValueError):
        Product(id="p-1", name="Mug", stock=-3)


def test_product_serialization():
    """Test Product to/from dict conversion."""
    product = Product(
        id="p-1",
        name="Canvas Tote",
        description="Everyday tote",
        price=259000,
        category="Bags",
        rating=4.5,
        stock=18,
        tags=["canvas", "tote"],
        specifications={"Material": "Canvas"},
        views=89,
        sales=12,
    )

    restored = Product.from_dict(product.to_dict())

    assert restored == product


def test_product_from_browser_payload():
    """Test camelCase keys written by the browser app are accepted."""
    restored = Product.from_dict({
        "id": "p-1",
        "name": "Basic Tee",
        "imageUrl": "https://example.com/tee.jpg",
        "isActive": False,
        "createdAt": "2024-06-01T10:00:00.000Z",
    })

    assert restored.image_url == "https://example.com/tee.jpg"
    assert restored.is_active is False
    assert restored.created_at == "2024-06-01T10:00:00.000Z"


def test_review_rating_validation():
    """Test Review rating must be 1-5."""
    review = Review(id="r-1", product_id="p-1", user_name="Lan", rating=1)
    assert review.helpful == 0

    for rating in (0, 6):
        with pytest.raises(ValueError):
            Review(id="r-1", product_id="p-1", user_name="Lan", rating=rating)


@pytest.mark.parametrize("overrides", [
    {"name": None},
    {"description": 7},
    {"created_at": 123},
    {"tags": ["ok", 1]},
    {"specifications": {"Size": 40}},
    {"price": "10"},
    {"rating": True},
    {"stock": 2.5},
    {"views": None},
    {"is_active": "yes"},
])
def test_product_rejects_wrong_field_types(overrides):
    data = {"id": "p-1", "name": "Mug"}
    data.update(overrides)

    with pytest.raises(ValueError):
        Product.from_dict(data)


def test_review_rejects_wrong_field_types():
    with pytest.raises(ValueError):
        Review.from_dict({"id": "r-1", "product_id": "p-1", "user_name": None, "rating": 4})

    with pytest.raises(ValueError):
        Review.from_dict({"id": "r-1", "product_id": "p-1", "user_name": "Lan", "rating": "4"})

    with pytest.raises(ValueError):
        Review(id="r-1", product_id="p-1", user_name="Lan", rating=4, helpful=1.5)


def test_favorite_serialization():
    favorite = Favorite(id="f-1", product_id="p-1", user_id="user1", created_at="2024-06-01T00:00:00+00:00")
    assert Favorite.from_dict(favorite.to_dict()) == favorite


def test_normalize_clamps_numbers():
    """Test form coercion of price, rating and stock."""
    fields = normalize_product_fields({"price": "-5", "rating": "7.5", "stock": "12.9"})

    assert fields == {"price": 0, "rating": 5, "stock": 12}

    fields = normalize_product_fields({"price": "abc", "rating": None, "stock": "-2"})

    assert fields == {"price": 0, "rating": 0, "stock": 0}


def test_normalize_tags_and_specifications():
    """Test comma-separated tags and blank specification entries."""
    fields = normalize_product_fields({
        "tags": " cotton, casual ,, basic ",
        "specifications": {" Material ": " Cotton ", "Size": "  ", "": "x"},
    })

    assert fields["tags"] == ["cotton", "casual", "basic"]
    assert fields["specifications"] == {"Material": "Cotton"}


def test_normalize_default_image_and_unknown_fields():
    """Test empty image URL falls back and unknown keys are dropped."""
    fields = normalize_product_fields(
        {"imageUrl": "  ", "name": "  Mug ", "color": "red"},
        default_image_url="https://example.com/default.jpg"
    )

    assert fields == {"image_url": "https://example.com/default.jpg", "name": "Mug"}


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
