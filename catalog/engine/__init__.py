"""
Pure catalog computations.

- Listing: filter, sort and paginate product snapshots
- Stats: aggregates, comparison table and dashboard report
"""
