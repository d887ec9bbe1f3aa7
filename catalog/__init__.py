"""
Merchio catalog.

Product listing, editing, reviews and favorites over a key-value store.
"""
