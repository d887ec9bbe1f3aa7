"""
Utility modules for the catalog.

Cross-cutting concerns:
- Storage: key-value persistence and collection encoding
- Timestamps: ISO-8601 UTC helpers
- Seed: demo catalogue
"""
