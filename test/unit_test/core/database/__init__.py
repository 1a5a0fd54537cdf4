"""Unit tests for the database layer.

Covers the SQLModel entities, the table registry and the engine/session
helpers in alumni_connect/core/database.
"""
