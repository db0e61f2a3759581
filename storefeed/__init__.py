"""Harvest a storefront's product listing into a JSON snapshot."""

__version__ = "0.1.0"
