"""Greffier infrastructure layer."""
