"""
Custom Exception Hierarchy

Only InvalidInputError (and its subclasses) is allowed to reach API callers.
ExternalServiceError is always recovered inside the explanation generator.
"""
from typing import Optional, Dict, Any


class MediSenseError(Exception):
    """Base exception for all MediSense errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidInputError(MediSenseError):
    """Caller supplied data the engine cannot evaluate."""

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
            details={"field": field, **(details or {})}
        )
        self.field = field


class NoCandidatesError(InvalidInputError):
    """Route selection was asked to choose from an empty candidate set."""

    def __init__(self, message: str = "No candidate routes to select from"):
        super().__init__(message=message, field="routes", details={"candidates": 0})


class ExternalServiceError(MediSenseError):
    """Text-generation call failed, timed out or returned nothing usable."""

    def __init__(
        self,
        message: str,
        service: str = "gemini",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="EXTERNAL_SERVICE_ERROR",
            details={"service": service, **(details or {})}
        )
        self.service = service
