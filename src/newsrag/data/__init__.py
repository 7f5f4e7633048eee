"""Bundled demo articles."""
