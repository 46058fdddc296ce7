"""Persistence layer: database session, ORM models, repositories."""
