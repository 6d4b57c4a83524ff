"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and HTTP responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    path: str
    pattern: str
    url: str
    http_status: int


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ConfigurationAppError(AppError):
    """Raised when startup configuration is invalid or cannot be inspected."""


class AssetReadAppError(AppError):
    """Raised when an asset (stylesheet, override, bundle) cannot be read."""


class BundleAppError(AppError):
    """Raised when the external bundler fails to produce the client bundle."""
