"""Scoring, layer policy and overlay composition."""
