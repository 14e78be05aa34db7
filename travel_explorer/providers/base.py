"""
Provider error types.

Upstream failures never surface as exceptions: providers degrade to empty
results. These errors are reserved for wiring mistakes, such as using the
engine without an open HTTP session.
"""

from typing import Optional, Dict


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider_name: Optional[str] = None, details: Optional[Dict] = None):
        """Initialize provider error.

        Args:
            message: Error message
            provider_name: Name of the provider that failed
            details: Additional error details
        """
        super().__init__(message)
        self.provider_name = provider_name
        self.details = details or {}


class ProviderNotAvailableError(ProviderError):
    """Raised when a provider cannot be used at all (e.g. closed session)."""
    pass
