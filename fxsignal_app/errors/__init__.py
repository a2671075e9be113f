"""
Error classification for the FX signal scoring library.

Pure scoring functions encode failure as ordinary return values. The
exceptions here are raised only at the payload boundary and when building
configuration.
"""

from .configuration import ConfigurationError
from .data_quality import (
    DataQualityError,
    TemporalDataError,
    MissingDataError,
    MalformedDataError,
    InsufficientDataError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "MissingDataError",
    "MalformedDataError",
    "InsufficientDataError",
    # Configuration
    "ConfigurationError",
]
