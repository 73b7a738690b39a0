"""
Honeypot field detector.

The honeypot is a text input hidden from people with styling but left in
the markup. Humans never see it; form-filling bots tend to populate every
input they find.
"""

from __future__ import annotations

from formguard.detectors.fields import get_field
from formguard.models import Agent, DetectionResult, Submission
from formguard.utils.logging import get_logger

logger = get_logger(__name__)


def check(submission: Submission, honeypot_field: str) -> DetectionResult:
    """
    Check whether the honeypot field was filled in.

    Args:
        submission: Submission to check
        honeypot_field: Name of the hidden field

    Returns:
        DetectionResult: Spam if the field is present with a non-blank value
    """
    value = get_field(submission, honeypot_field)
    if value is None or not value.strip():
        return DetectionResult.clean()

    logger.debug("Honeypot field %r was filled", honeypot_field)
    return DetectionResult.spam(Agent.HONEYPOT, "Honeypot field was filled")
