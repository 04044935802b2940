"""Persistence: ORM models, engine/session setup and repositories."""
