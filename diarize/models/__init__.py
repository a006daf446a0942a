"""Schemas for stored models and match results."""
