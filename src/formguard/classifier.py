"""
Spam classification pipeline for form submissions.

Runs the detectors in a fixed order, cheapest and most specific first:

1. Honeypot field
2. Submission timing
3. Message content

and folds their results into a single Verdict. By default the first
detector to report spam ends the run, so the verdict carries the most
specific reason available.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Optional

from formguard.config import Config
from formguard.detectors import content, honeypot, timing
from formguard.detectors.fields import extract_message
from formguard.models import DetectionResult, SpamLogEntry, Submission, Verdict
from formguard.utils.logging import get_logger

logger = get_logger(__name__)

Detector = Callable[[Submission, float], DetectionResult]


class SpamClassifier:
    """
    Classifies form submissions as spam or not spam.

    Holds only immutable state, so a single instance can be shared by
    every request a host handles concurrently.

    Attributes:
        config: Thresholds used by the detectors
        detectors: Ordered (name, detector) pairs the pipeline runs
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        """
        Initialize the classifier.

        Args:
            config: Classifier configuration; defaults to ``Config()``
        """
        self.config = config or Config()
        self.detectors: tuple[tuple[str, Detector], ...] = (
            ("honeypot", self._check_honeypot),
            ("timing", self._check_timing),
            ("content", self._check_content),
        )

        logger.debug(
            "SpamClassifier initialized (honeypot=%s, short_circuit=%s)",
            self.config.honeypot_field,
            self.config.short_circuit,
        )

    def _check_honeypot(self, submission: Submission, now: float) -> DetectionResult:
        return honeypot.check(submission, self.config.honeypot_field)

    def _check_timing(self, submission: Submission, now: float) -> DetectionResult:
        return timing.check(
            submission,
            now,
            self.config.min_submit_seconds,
            self.config.max_submit_seconds,
            timestamp_field=self.config.timestamp_field,
        )

    def _check_content(self, submission: Submission, now: float) -> DetectionResult:
        message = extract_message(submission, self.config.message_fields)
        return content.check(message, self.config)

    def classify(self, submission: Submission, now: Optional[float] = None) -> Verdict:
        """
        Classify a submission.

        Args:
            submission: Submission to classify
            now: Current epoch time; defaults to the submission's arrival time

        Returns:
            Verdict: Spam flag and the log entries explaining it

        Raises:
            ValueError: If now is not a finite epoch time
        """
        if now is None:
            now = submission.received_at
        if not math.isfinite(now):
            raise ValueError(f"now must be a finite epoch time (got {now!r})")

        log: list[SpamLogEntry] = []
        for name, detector in self.detectors:
            result = detector(submission, now)
            if not result.is_spam:
                continue
            logger.debug("Detector %s flagged submission", name)
            log.append(result.entry)
            if self.config.short_circuit:
                break

        verdict = Verdict(log=tuple(log))
        if verdict.is_spam:
            logger.info("Submission flagged as spam: %s", "; ".join(verdict.reasons))
        else:
            logger.debug("Submission passed all detectors")
        return verdict


def classify(
    submission: Submission,
    config: Optional[Config] = None,
    now: Optional[float] = None,
) -> Verdict:
    """
    Classify a submission with the given configuration.

    Args:
        submission: Submission to classify
        config: Configuration; the shared default classifier is used if omitted
        now: Current epoch time; defaults to the submission's arrival time

    Returns:
        Verdict: Spam flag and the log entries explaining it
    """
    classifier = SpamClassifier(config) if config is not None else get_classifier()
    return classifier.classify(submission, now)


# Global classifier instance
_classifier: Optional[SpamClassifier] = None


def get_classifier() -> SpamClassifier:
    """
    Get the global classifier instance with default configuration.

    Returns:
        SpamClassifier: Shared classifier instance
    """
    global _classifier
    if _classifier is None:
        _classifier = SpamClassifier()
    return _classifier

