"""
Utility functions module.

Time Semantics:
- Session calculations take an injectable ``now``
- Wall-clock time is only a fallback when no time is supplied
- Naive datetimes are always interpreted as UTC
"""
