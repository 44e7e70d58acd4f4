"""Utility helpers for Handpicked."""

from handpicked.utils.logging_setup import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
