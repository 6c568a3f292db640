"""Infrastructure layer — database, repositories, realm lookups, store context.

This layer depends on stdlib, third-party libs (SQLAlchemy, pluggy), the
domain layer, and configuration. It must never import from services.
"""
