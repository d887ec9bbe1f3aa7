"""
Demo catalogue written on the first read of an empty store.
"""

import uuid
from typing import List

from catalog.models.product import Product
from catalog.utils.timestamps import utc_now_iso

SEED_PRODUCTS = [
    {
        "name": "Basic Tee",
        "description": "Soft cotton tee in charcoal. Perfect for everyday wear with a comfortable fit and premium quality fabric.",
        "price": 199000,
        "category": "Apparel",
        "rating": 4,
        "stock": 32,
        "image_url": "https://images.unsplash.com/photo-1512436991641-6745cdb1723f?q=80&w=1200&auto=format&fit=crop",
        "tags": ["cotton", "casual", "basic"],
        "specifications": {
            "Material": "100% Cotton",
            "Size": "S, M, L, XL",
            "Color": "Charcoal",
            "Care": "Machine wash cold",
        },
        "views": 156,
        "sales": 23,
    },
    {
        "name": "Canvas Tote",
        "description": "Durable everyday tote bag made from premium canvas. Spacious interior with reinforced handles.",
        "price": 259000,
        "category": "Bags",
        "rating": 5,
        "stock": 18,
        "image_url": "https://images.unsplash.com/photo-1546421845-6471bdcf3ebf?q=80&w=1200&auto=format&fit=crop",
        "tags": ["canvas", "tote", "eco-friendly"],
        "specifications": {
            "Material": "Heavy-duty Canvas",
            "Dimensions": "40cm x 35cm x 10cm",
            "Weight": "500g",
            "Features": "Reinforced handles, Interior pocket",
        },
        "views": 89,
        "sales": 12,
    },
    {
        "name": "Ceramic Mug",
        "description": "12oz matte black ceramic mug with ergonomic handle. Perfect for coffee, tea, or any hot beverage.",
        "price": 99000,
        "category": "Home",
        "rating": 3,
        "stock": 54,
        "image_url": "https://images.unsplash.com/photo-1485808191679-5f86510681a2?q=80&w=1200&auto=format&fit=crop",
        "tags": ["ceramic", "mug", "kitchen"],
        "specifications": {
            "Material": "Ceramic",
            "Capacity": "12oz (350ml)",
            "Finish": "Matte black",
            "Dishwasher": "Safe",
        },
        "views": 203,
        "sales": 45,
    },
    {
        "name": "Wireless Headphones",
        "description": "Premium wireless headphones with noise cancellation and 30-hour battery life.",
        "price": 1299000,
        "category": "Electronics",
        "rating": 4.5,
        "stock": 8,
        "image_url": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?q=80&w=1200&auto=format&fit=crop",
        "tags": ["wireless", "headphones", "noise-cancellation"],
        "specifications": {
            "Battery": "30 hours",
            "Connectivity": "Bluetooth 5.0",
            "Noise Cancellation": "Active",
            "Weight": "250g",
        },
        "views": 312,
        "sales": 67,
    },
    {
        "name": "Leather Wallet",
        "description": "Genuine leather wallet with RFID blocking technology and multiple card slots.",
        "price": 399000,
        "category": "Accessories",
        "rating": 4.2,
        "stock": 25,
        "image_url": "https://images.unsplash.com/photo-1553062407-98eeb64c6a62?q=80&w=1200&auto=format&fit=crop",
        "tags": ["leather", "wallet", "rfid"],
        "specifications": {
            "Material": "Genuine Leather",
            "RFID Protection": "Yes",
            "Card Slots": "8",
            "Coin Pocket": "Yes",
        },
        "views": 178,
        "sales": 34,
    },
]


def build_seed_products() -> List[Product]:
    """Fresh Product records for the demo catalogue, stamped with the current time."""
    created_at = utc_now_iso()
    return [
        Product(id=str(uuid.uuid4()), created_at=created_at, is_active=True, **data)
        for data in SEED_PRODUCTS
    ]
