"""
Submission timing detector.

The host renders a hidden field holding the epoch time at which the form
was served. A person needs a few seconds to fill in a form and rarely
leaves one open for more than an hour; bots either post instantly, replay
stale forms, or skip the hidden field entirely.
"""

from __future__ import annotations

import math
from typing import Optional

from formguard.config import DEFAULT_TIMESTAMP_FIELD
from formguard.detectors.fields import get_field
from formguard.models import Agent, DetectionResult, Submission
from formguard.utils.logging import get_logger

logger = get_logger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[int]:
    """
    Parse a render timestamp posted back by the form.

    Args:
        value: Raw field value

    Returns:
        Epoch seconds (decimals truncated), or None if missing or unparseable
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        number = float(text)
    except (ValueError, OverflowError):
        return None
    # Digit strings too long for a float parse as inf
    if not math.isfinite(number):
        return None
    try:
        return int(text)
    except ValueError:
        return int(number)


def check(
    submission: Submission,
    now: float,
    min_seconds: int,
    max_seconds: int,
    timestamp_field: str = DEFAULT_TIMESTAMP_FIELD,
) -> DetectionResult:
    """
    Check how long the form was open before it was submitted.

    Args:
        submission: Submission to check
        now: Current epoch time
        min_seconds: Submissions faster than this are spam
        max_seconds: Submissions older than this are spam
        timestamp_field: Name of the hidden render-time field

    Returns:
        DetectionResult: Spam if the timestamp is missing or out of range

    Raises:
        ValueError: If now is not a finite number
    """
    if not math.isfinite(now):
        raise ValueError(f"now must be a finite epoch time (got {now!r})")

    rendered_at = parse_timestamp(get_field(submission, timestamp_field))
    if rendered_at is None:
        logger.debug("Timestamp field %r missing or unparseable", timestamp_field)
        return DetectionResult.spam(Agent.TIMESTAMP, "Timestamp field missing")

    # Clock skew can make this negative; that counts as too quick.
    elapsed = now - rendered_at
    seconds = int(elapsed)

    if elapsed < min_seconds:
        logger.debug("Form submitted after %.1fs (min %ds)", elapsed, min_seconds)
        return DetectionResult.spam(
            Agent.TIMESTAMP,
            f"Form submitted too quickly ({seconds} seconds)",
            count=seconds,
        )

    if elapsed > max_seconds:
        logger.debug("Form submitted after %.1fs (max %ds)", elapsed, max_seconds)
        return DetectionResult.spam(
            Agent.TIMESTAMP,
            f"Form session expired ({seconds} seconds old)",
            count=seconds,
        )

    return DetectionResult.clean()
