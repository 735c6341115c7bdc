"""Database models for the persistence layer.

These are infrastructure concerns and must not be imported by the domain
layer. Domain entities (dataclasses) live in src/domain/entities/ and are
mapped to and from these models by adapters.
"""

from src.infrastructure.persistence.models.audit_log import AuditLogModel

__all__ = ["AuditLogModel"]
