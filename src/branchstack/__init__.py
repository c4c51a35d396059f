"""Stacked git branches modelled as a persisted graph."""
