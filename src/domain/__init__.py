"""Domain layer - Pure business logic.

This layer contains the core business entities, value objects, enums
and protocols (ports). The domain layer has NO dependencies on any
framework or infrastructure - it is pure Python.

Structure:
- entities/: Domain entities (have identity)
- value_objects/: Value objects (immutable, no identity)
- enums/: Audit event types and severities
- errors/: Domain errors carried in Failure results
- protocols/: Ports for the cache, rate limiter, audit store and logger

The domain layer defines WHAT the business does, not HOW it's implemented.
"""
