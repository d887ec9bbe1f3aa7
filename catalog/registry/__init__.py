"""
Registry Module.

Storage-backed collections: products with their reviews, and favorites.
"""
