"""
Core utilities and configuration for Alumni Connect.

This package provides core functionality including logging configuration,
settings, the error taxonomy, domain models and the database layer.
"""

from alumni_connect.core.logging_config import setup_logging

__all__ = ["setup_logging"]
