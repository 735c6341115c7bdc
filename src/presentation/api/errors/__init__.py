"""HTTP error rendering."""

from src.presentation.api.errors.exception_handlers import (
    rate_limit_exceeded_handler,
    register_error_handlers,
)

__all__ = ["rate_limit_exceeded_handler", "register_error_handlers"]
