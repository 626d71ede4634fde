"""Standalone helper tools for pzsdev."""
