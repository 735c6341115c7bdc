"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- cache/: Redis adapter (lock store)
- rate_limit/: Gate and counter limiter, endpoint limit table
- audit/: SQLAlchemy audit store
- persistence/: Engine, sessions and models
- logging/: structlog adapter

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
