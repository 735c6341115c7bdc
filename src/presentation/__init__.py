"""Presentation layer - HTTP concerns.

Structure:
- api/middleware/: Request context capture
- api/errors/: Exception to HTTP response mapping
- api/v1/: Usage statistics and audit trail routes

The presentation layer depends on the application layer but contains NO
business logic.
"""
