"""Locate the fields the detectors inspect in a submission."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from formguard.models import Submission


def get_field(submission: Submission, name: str) -> Optional[str]:
    """Return the raw value of a field, or None if it was not posted."""
    return submission.get(name)


def extract_message(submission: Submission, candidate_fields: Iterable[str]) -> Optional[str]:
    """
    Find the message body of a submission.

    Forms name their free-text field differently, so the candidates are
    tried in priority order and the first non-empty one wins.

    Args:
        submission: Submission to search
        candidate_fields: Field names, highest priority first

    Returns:
        The first populated candidate value, or None if none is populated
    """
    for name in candidate_fields:
        value = submission.get(name)
        if value:
            return value
    return None
