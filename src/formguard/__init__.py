"""
FormGuard - heuristic spam classification for web form submissions.

This package decides whether a form submission is spam, and why, using:
- A hidden honeypot field
- Render-to-submit timing
- Message content heuristics (links, shouting, keywords, repetition)

Hosts build a Submission from the posted data, call classify(), and act
on the returned Verdict.
"""

from __future__ import annotations

from formguard.classifier import SpamClassifier, classify, get_classifier
from formguard.config import Config, load_config
from formguard.models import Agent, DetectionResult, SpamLogEntry, Submission, Verdict

__version__ = "1.0.0"
__all__ = [
    "Agent",
    "Config",
    "DetectionResult",
    "SpamClassifier",
    "SpamLogEntry",
    "Submission",
    "Verdict",
    "classify",
    "get_classifier",
    "load_config",
    "main",
]

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_SPAM = 2


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the command line classifier.

    Reads a JSON object of form fields from a file or stdin, classifies it
    and prints the verdict as JSON.

    Returns:
        int: 0 if not spam, 2 if spam, 1 on configuration or input errors
    """
    import argparse
    import json
    import math
    import sys

    from formguard.utils.logging import setup_logging, get_logger

    parser = argparse.ArgumentParser(
        prog="formguard",
        description="Classify a form submission (JSON object of field values) as spam or not.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="JSON file with the submitted fields (default: read stdin)",
    )
    parser.add_argument("--env-file", help="Path to a .env file with classifier settings")
    parser.add_argument(
        "--now",
        type=float,
        default=None,
        help="Epoch time to classify at (default: current time)",
    )
    args = parser.parse_args(argv)

    if args.now is not None and not math.isfinite(args.now):
        print(f"Input error: --now must be a finite epoch time (got {args.now})", file=sys.stderr)
        return EXIT_ERROR

    # Load configuration
    try:
        config = load_config(args.env_file)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    setup_logging(config)
    logger = get_logger(__name__)

    try:
        if args.file:
            with open(args.file, encoding="utf-8") as fh:
                data = json.load(fh)
        else:
            data = json.load(sys.stdin)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Input error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if not isinstance(data, dict):
        print("Input error: expected a JSON object of field values", file=sys.stderr)
        return EXIT_ERROR

    submission = Submission.from_mapping(data, received_at=args.now)
    verdict = SpamClassifier(config).classify(submission)

    print(json.dumps(verdict.to_dict(), indent=2))
    logger.debug("Classified submission with %d fields", len(submission.fields))

    return EXIT_SPAM if verdict.is_spam else EXIT_OK
