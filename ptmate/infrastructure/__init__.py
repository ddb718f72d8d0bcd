"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- database: SQLAlchemy engine, tables and repositories
- security: Password hashing (passlib) and bearer tokens (python-jose)
- storage: Object storage (R2/S3)

These wrappers translate between external formats and our domain models.
"""
