"""Shared schemas and error handling."""
