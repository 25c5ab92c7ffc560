"""Core business logic: scoring, configuration, and data models.

This module is framework-agnostic. It has no dependency on MCP, SQLAlchemy,
or any server framework. Persistence reaches it only through the
SessionHistory protocol in ``consistency``.
"""
