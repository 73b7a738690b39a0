"""
Utility modules for the form spam classifier.

Provides:
- logging: Logging setup with contact-detail redaction
"""

from formguard.utils.logging import get_logger, setup_logging, RedactionFilter

__all__ = [
    "get_logger",
    "setup_logging",
    "RedactionFilter",
]
