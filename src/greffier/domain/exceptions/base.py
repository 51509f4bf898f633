"""
Base domain exceptions.
"""

from typing import Optional


class GreffierException(Exception):
    """Base exception for all Greffier domain errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)
