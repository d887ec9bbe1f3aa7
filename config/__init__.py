"""
Configuration for the Merchio catalog.
"""
