"""Projection, entity model and static catalogs."""
