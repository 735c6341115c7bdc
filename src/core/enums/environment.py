"""Application environment types.

Used by Settings to pick environment-specific behavior, most visibly the
log renderer (JSON in testing/ci, colored console in development).
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
