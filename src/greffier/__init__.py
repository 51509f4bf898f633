"""
Greffier - client-side Solana transaction pipeline for program enrollment.
"""

__version__ = "0.1.0"

from greffier.application.use_cases import EnrollmentWorkflow
from greffier.di import DIContainer, get_container

__all__ = [
    "EnrollmentWorkflow",
    "DIContainer",
    "get_container",
    "__version__",
]
