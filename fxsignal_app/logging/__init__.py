"""
Logging configuration and utilities for the FX signal scoring library.
"""
from .config import configure_logging, get_logger, get_pattern_logger, log_pattern_detection

__all__ = ["configure_logging", "get_logger", "get_pattern_logger", "log_pattern_detection"]
