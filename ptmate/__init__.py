"""
PT Mate - practice-management backend for personal trainers.

This package contains the complete application:
- core: Framework-agnostic business logic
- infrastructure: Database, security and object storage integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
