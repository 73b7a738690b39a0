"""
Content heuristics for form messages.

Runs six checks against the extracted message, in a fixed order, and
reports the first one that fires:
- URL count
- Uppercase ratio (shouting)
- Word count (gibberish / empty pings)
- Spam keywords
- Repetitive text patterns
- Special character ratio
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Optional

from formguard.config import Config
from formguard.models import Agent, DetectionResult
from formguard.utils.logging import get_logger

logger = get_logger(__name__)


class ContentAnalyzer:
    """
    Heuristic content checks for a single message.

    Each ``check_*`` method returns ``(is_spam, evidence)`` and can be used
    on its own; :meth:`analyze` runs them in order and stops at the first
    positive.
    """

    URL_PATTERN = re.compile(r"https?://[^\s]+", re.IGNORECASE)

    # A single character repeated 6+ times ("aaaaaa")
    REPEATED_CHAR_PATTERN = re.compile(r"(.)\1{5,}")

    # A run of 2 to MAX_REPEATED_RUN characters repeated 4+ times in a row
    # ("123123123123"). An unbounded run backtracks in cubic time on long
    # messages, so the run length is capped.
    MAX_REPEATED_RUN = 64
    REPEATED_RUN_PATTERN = re.compile(r"(.{2,%d})\1{3,}" % MAX_REPEATED_RUN)

    # Anything that is not a letter, digit, whitespace or plain punctuation
    SPECIAL_CHAR_PATTERN = re.compile(r"[^a-zA-Z0-9\s.,!?\-'\"()]")

    # Below this many letters the caps ratio is too noisy to judge
    MIN_LETTERS_FOR_CAPS = 10

    def __init__(self, config: Config) -> None:
        """
        Initialize the analyzer.

        Args:
            config: Thresholds and keyword list to apply
        """
        self.config = config

    def count_urls(self, message: str) -> int:
        """Count http(s) URLs in a message."""
        return len(self.URL_PATTERN.findall(message))

    def caps_percentage(self, message: str) -> Optional[float]:
        """
        Percentage of ASCII letters that are uppercase.

        Returns:
            The percentage, or None when the message has too few letters
        """
        letters = [c for c in message if c.isascii() and c.isalpha()]
        if len(letters) < self.MIN_LETTERS_FOR_CAPS:
            return None
        upper = sum(1 for c in letters if c.isupper())
        return upper / len(letters) * 100

    def count_words(self, message: str) -> int:
        """Count whitespace-delimited words."""
        return len(message.split())

    def find_keyword(self, message: str, keywords: Optional[Iterable[str]] = None) -> Optional[str]:
        """
        Find the first spam keyword contained in a message.

        Args:
            message: Message to search
            keywords: Keywords to look for; defaults to the configured list

        Returns:
            The first matching keyword in list order, or None
        """
        if keywords is None:
            keywords = self.config.spam_keywords
        message_lower = message.lower()
        for keyword in keywords:
            if keyword.lower() in message_lower:
                return keyword
        return None

    def has_repetition(self, message: str) -> bool:
        """Check for repeated characters or repeated runs of text."""
        return bool(
            self.REPEATED_CHAR_PATTERN.search(message)
            or self.REPEATED_RUN_PATTERN.search(message)
        )

    def special_char_percentage(self, message: str) -> float:
        """Percentage of characters outside letters, digits, whitespace and basic punctuation."""
        if not message:
            return 0.0
        special = len(self.SPECIAL_CHAR_PATTERN.findall(message))
        return special / len(message) * 100

    def check_urls(self, message: str) -> tuple[bool, int]:
        count = self.count_urls(message)
        return count > self.config.max_urls, count

    def check_caps(self, message: str) -> tuple[bool, float]:
        percentage = self.caps_percentage(message)
        if percentage is None:
            return False, 0.0
        return percentage > self.config.max_caps_percentage, percentage

    def check_word_count(self, message: str) -> tuple[bool, int]:
        count = self.count_words(message)
        return count < self.config.min_words, count

    def check_keywords(self, message: str) -> tuple[bool, Optional[str]]:
        keyword = self.find_keyword(message)
        return keyword is not None, keyword

    def check_special_chars(self, message: str) -> tuple[bool, float]:
        percentage = self.special_char_percentage(message)
        return percentage > self.config.special_char_percentage, percentage

    def analyze(self, message: str) -> DetectionResult:
        """
        Run every content check in order, stopping at the first positive.

        Args:
            message: Extracted message text

        Returns:
            DetectionResult: Spam with the reason of the first check that fired
        """
        config = self.config

        is_spam, url_count = self.check_urls(message)
        if is_spam:
            return self._flag(
                "urls",
                f"Too many URLs in message ({url_count} found, max {config.max_urls} allowed)",
                count=url_count,
            )

        is_spam, caps = self.check_caps(message)
        if is_spam:
            return self._flag(
                "caps",
                f"Excessive uppercase text ({caps:.0f}% caps, "
                f"max {config.max_caps_percentage}% allowed)",
                percentage=caps,
            )

        is_spam, word_count = self.check_word_count(message)
        if is_spam:
            return self._flag(
                "word_count",
                f"Message too short ({word_count} words, min {config.min_words} required)",
                count=word_count,
            )

        is_spam, keyword = self.check_keywords(message)
        if is_spam:
            return self._flag("keyword", f'Spam keyword detected: "{keyword}"')

        if self.has_repetition(message):
            return self._flag("repetition", "Repetitive text pattern detected")

        is_spam, special = self.check_special_chars(message)
        if is_spam:
            return self._flag(
                "special_chars",
                f"Excessive special characters ({special:.0f}% of message, "
                f"max {config.special_char_percentage}% allowed)",
                percentage=special,
            )

        return DetectionResult.clean()

    def _flag(
        self,
        check_name: str,
        reason: str,
        count: Optional[int] = None,
        percentage: Optional[float] = None,
    ) -> DetectionResult:
        logger.debug("Content check %s fired: %s", check_name, reason)
        return DetectionResult.spam(Agent.CONTENT, reason, count=count, percentage=percentage)


def check(message: Optional[str], config: Config) -> DetectionResult:
    """
    Run the content heuristics on an extracted message.

    Args:
        message: Message text, or None if no message field was populated
        config: Thresholds and keyword list to apply

    Returns:
        DetectionResult: Clean when there is no message to analyze
    """
    if not message:
        return DetectionResult.clean()
    return ContentAnalyzer(config).analyze(message)
