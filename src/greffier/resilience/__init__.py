"""
Resilience patterns for RPC access.
"""

from greffier.resilience.retry import Retry, RetryError, RetryPolicy

__all__ = ["Retry", "RetryError", "RetryPolicy"]
