"""
Configuration management for the form spam classifier.

Loads thresholds from environment variables and .env files,
validates them, and provides type-safe, immutable access.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_HONEYPOT_FIELD = "your-website"
DEFAULT_TIMESTAMP_FIELD = "cf7_timestamp"

DEFAULT_MESSAGE_FIELDS: tuple[str, ...] = (
    "your-message",
    "message",
    "your-comment",
    "comment",
)

# Order matters: the first keyword found is the one reported.
DEFAULT_SPAM_KEYWORDS: tuple[str, ...] = (
    # Pharmaceutical spam
    "viagra", "cialis", "pharmacy", "prescription",

    # Gambling spam
    "casino", "poker", "betting", "gambling",

    # Financial spam
    "loan", "mortgage", "crypto", "bitcoin", "forex",
    "investment opportunity", "passive income", "cash flow",
    "earning money", "earn money", "make money", "making money",
    "thousands of dollars", "hundreds of dollars", "money flow",

    # Call-to-action spam
    "click here", "buy now", "limited offer", "act now",
    "order now", "visit now", "check this out",

    # Marketing/SEO spam
    "weight loss", "work from home", "seo service", "seo services",
    "link building", "increase traffic", "backlinks", "boost your ranking",
    "get more followers", "grow your business",

    # Social media spam
    "instagram followers", "facebook likes", "youtube views",
    "increase followers", "gain followers",

    # Common spam phrases
    "real deal", "skeptical at first", "evaluation copy",
    "this system", "amazing opportunity", "limited time",
    "don't miss out", "act fast", "special offer",
    "congratulations", "you've been selected", "claim your",
    "risk free", "money back guarantee", "no obligation",
)

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration for the spam classifier.

    Every threshold has a default, so ``Config()`` is a working
    configuration. Invalid combinations raise ValueError on construction,
    never during classification.

    Counts and second thresholds must be non-negative; zero is allowed, so
    ``max_urls=0`` forbids links and ``min_words=0`` disables the word
    count. Percentages must lie in [0, 100], and ``min_submit_seconds``
    must be strictly less than ``max_submit_seconds``.

    Attributes:
        honeypot_field: Name of the hidden field that humans leave empty
        timestamp_field: Name of the hidden field holding the render time
        max_urls: Maximum URLs allowed in the message
        max_caps_percentage: Maximum percentage of uppercase letters
        min_words: Minimum number of words in the message
        min_submit_seconds: Minimum seconds between render and submit
        max_submit_seconds: Maximum seconds before the form session expires
        special_char_percentage: Maximum percentage of special characters
        spam_keywords: Spam-indicative substrings, checked in order
        message_fields: Candidate message fields, in priority order
        short_circuit: Stop at the first detector that reports spam
        log_level: Logging level (default: INFO)
        log_file: Optional log file path
    """

    honeypot_field: str = DEFAULT_HONEYPOT_FIELD
    timestamp_field: str = DEFAULT_TIMESTAMP_FIELD
    max_urls: int = 1
    max_caps_percentage: int = 50
    min_words: int = 3
    min_submit_seconds: int = 5
    max_submit_seconds: int = 3600
    special_char_percentage: int = 30
    spam_keywords: tuple[str, ...] = DEFAULT_SPAM_KEYWORDS
    message_fields: tuple[str, ...] = DEFAULT_MESSAGE_FIELDS
    short_circuit: bool = True
    log_level: str = "INFO"
    log_file: str | None = None

    def __post_init__(self) -> None:
        """Normalize list fields and reject invalid thresholds."""
        # Use object.__setattr__ because dataclass is frozen
        object.__setattr__(
            self, "spam_keywords", tuple(k.lower() for k in self.spam_keywords if k)
        )
        object.__setattr__(
            self, "message_fields", tuple(f for f in self.message_fields if f)
        )

        errors = self.validate()
        if errors:
            error_msg = "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            raise ValueError(error_msg)

    def validate(self) -> list[str]:
        """Return a list of problems with this configuration (empty if valid)."""
        errors: list[str] = []

        if not self.honeypot_field.strip():
            errors.append("honeypot_field must not be empty")
        if not self.timestamp_field.strip():
            errors.append("timestamp_field must not be empty")

        for name in ("max_urls", "min_words", "min_submit_seconds", "max_submit_seconds"):
            if getattr(self, name) < 0:
                errors.append(f"{name} must not be negative")

        for name in ("max_caps_percentage", "special_char_percentage"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                errors.append(f"{name} must be between 0 and 100 (got {value})")

        if self.min_submit_seconds >= self.max_submit_seconds:
            errors.append(
                "min_submit_seconds must be less than max_submit_seconds "
                f"({self.min_submit_seconds} >= {self.max_submit_seconds})"
            )

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(sorted(VALID_LOG_LEVELS))}")

        return errors


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse a boolean from environment variable string."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_int(value: str | None, default: int) -> int:
    """Parse an integer from environment variable string."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_list(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse a comma-separated list, keeping the default when unset."""
    if value is None:
        return default
    items = [item.strip() for item in value.split(",")]
    return tuple(item for item in items if item)


def load_config(env_file: str | Path | None = None) -> Config:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If not provided,
                  looks for .env in current directory and parent directories.

    Returns:
        Config: Validated configuration object

    Raises:
        ValueError: If the resulting configuration is invalid
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    defaults = Config()

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if log_level not in VALID_LOG_LEVELS:
        log_level = "INFO"

    return Config(
        honeypot_field=os.getenv("FORMGUARD_HONEYPOT_FIELD", defaults.honeypot_field),
        timestamp_field=os.getenv("FORMGUARD_TIMESTAMP_FIELD", defaults.timestamp_field),
        max_urls=_parse_int(os.getenv("FORMGUARD_MAX_URLS"), defaults.max_urls),
        max_caps_percentage=_parse_int(
            os.getenv("FORMGUARD_MAX_CAPS_PERCENTAGE"), defaults.max_caps_percentage
        ),
        min_words=_parse_int(os.getenv("FORMGUARD_MIN_WORDS"), defaults.min_words),
        min_submit_seconds=_parse_int(
            os.getenv("FORMGUARD_MIN_SUBMIT_SECONDS"), defaults.min_submit_seconds
        ),
        max_submit_seconds=_parse_int(
            os.getenv("FORMGUARD_MAX_SUBMIT_SECONDS"), defaults.max_submit_seconds
        ),
        special_char_percentage=_parse_int(
            os.getenv("FORMGUARD_SPECIAL_CHAR_PERCENTAGE"), defaults.special_char_percentage
        ),
        spam_keywords=_parse_list(os.getenv("FORMGUARD_SPAM_KEYWORDS"), defaults.spam_keywords),
        message_fields=_parse_list(
            os.getenv("FORMGUARD_MESSAGE_FIELDS"), defaults.message_fields
        ),
        short_circuit=_parse_bool(os.getenv("FORMGUARD_SHORT_CIRCUIT"), defaults.short_circuit),
        log_level=log_level,
        log_file=os.getenv("LOG_FILE") or None,
    )
