"""
Logging configuration and utilities for the token reconciler.
"""
from .config import configure_logging, get_logger, setup_logging

__all__ = ["configure_logging", "get_logger", "setup_logging"]
