"""Cycling Events - aggregated cycling event listings.

This package scrapes cycling event listings from BikeReg and the New York
Cycle Club, normalizes them into one event schema, and returns a single
deduplicated feed ordered by date.
"""

__version__ = "0.1.0"
