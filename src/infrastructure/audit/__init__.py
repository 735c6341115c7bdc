"""Audit infrastructure implementations.

Concrete implementations of AuditProtocol.
"""

from src.infrastructure.audit.sqlalchemy_adapter import SQLAlchemyAuditAdapter

__all__ = ["SQLAlchemyAuditAdapter"]
