"""Domain protocols (ports) package.

This package contains protocol definitions that the domain layer needs.
Infrastructure adapters implement these protocols without inheritance.

IMPORTANT: Re-exports are ONLY for protocols defined in this package.
Do NOT re-export from other domain subpackages (entities, value objects).

Usage:
    from src.domain.protocols import AuditProtocol, RateLimitProtocol
"""

from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.cache_protocol import CacheProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.rate_limit_protocol import RateLimitProtocol

__all__ = [
    "AuditProtocol",
    "CacheProtocol",
    "LoggerProtocol",
    "RateLimitProtocol",
]
