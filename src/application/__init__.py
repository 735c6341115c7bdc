"""Application layer - Use cases and orchestration.

Structure:
- services/: Usage recorder and audit statistics
- dependencies/: FastAPI rate limit dependencies
- errors/: Exceptions surfaced to the presentation layer

The application layer orchestrates domain logic but contains no business rules.
"""
