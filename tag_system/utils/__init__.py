"""Shared utilities for the tag system."""

from tag_system.utils.logging_config import setup_logging, get_logger

__all__ = ["setup_logging", "get_logger"]
