"""
Configuration error classification.

Raised when merged configuration fails validation and cannot be turned
back into typed parameter objects.
"""

from typing import Any, Optional


class ConfigurationError(Exception):
    """Invalid configuration that prevents building analysis parameters."""

    def __init__(self, message: str, errors: Optional[list[Any]] = None,
                 symbol: Optional[str] = None):
        super().__init__(message)
        self.errors = errors or []
        self.symbol = symbol
        self.recoverable = False
