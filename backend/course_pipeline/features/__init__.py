"""
Feature modules for the course pipeline.

Each feature is a self-contained module with (as needed):
- models.py - SQLAlchemy models
- schemas.py - Records / pydantic schemas
- client.py - External API client
- service.py - Business logic
- repository.py - Data access
"""
