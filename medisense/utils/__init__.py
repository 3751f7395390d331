"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    MediSenseError,
    InvalidInputError,
    NoCandidatesError,
    ExternalServiceError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "MediSenseError",
    "InvalidInputError",
    "NoCandidatesError",
    "ExternalServiceError",
]
