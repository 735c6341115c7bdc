"""Core shared kernel.

This module provides foundational utilities used across all architectural layers:
- Result types for explicit success/failure outcomes
- Base error class carried inside Failure
- Error codes, settings and the ambient request context

The core module has NO dependencies on other application layers.
"""

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "Success",
]
