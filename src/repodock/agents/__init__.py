"""Clients for the optional enrichment services."""
