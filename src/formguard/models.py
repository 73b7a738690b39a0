"""
Data types shared by the detectors and the classification pipeline.

A host builds a Submission from its posted form data, the detectors turn
it into DetectionResults, and the pipeline folds those into a Verdict the
host can act on and write to its audit log.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional


class Agent(Enum):
    """Detectors that can flag a submission."""
    HONEYPOT = "honeypot"
    TIMESTAMP = "timestamp"
    CONTENT = "content-analysis"


def _coerce_value(value: Any) -> str:
    """Flatten a posted value to the string the detectors inspect."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        # Checkbox groups and multi-selects arrive as sequences
        return ", ".join(_coerce_value(v) for v in value)
    return str(value)


@dataclass(frozen=True)
class Submission:
    """
    One form submission as seen by the classifier.

    Attributes:
        fields: Read-only mapping of field name to submitted value
        received_at: Epoch seconds at which the submission arrived
    """
    fields: Mapping[str, str]
    received_at: float

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        received_at: Optional[float] = None,
    ) -> Submission:
        """
        Build a submission from posted form data.

        Args:
            data: Field name to value mapping from the host
            received_at: Arrival time; defaults to the current time

        Returns:
            Submission: Immutable snapshot of the posted data
        """
        fields = {str(name): _coerce_value(value) for name, value in data.items()}
        if received_at is None:
            received_at = time.time()
        return cls(fields=MappingProxyType(fields), received_at=received_at)

    def get(self, name: str) -> Optional[str]:
        """Return the value of a field, or None if it was not posted."""
        return self.fields.get(name)


@dataclass(frozen=True)
class SpamLogEntry:
    """Why a detector flagged a submission."""
    agent: Agent
    reason: str
    count: Optional[int] = None
    percentage: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the host's spam log."""
        entry: dict[str, Any] = {"agent": self.agent.value, "reason": self.reason}
        if self.count is not None:
            entry["count"] = self.count
        if self.percentage is not None:
            entry["percentage"] = self.percentage
        return entry


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of a single detector."""
    entry: Optional[SpamLogEntry] = None

    @property
    def is_spam(self) -> bool:
        """Check if the detector flagged the submission."""
        return self.entry is not None

    @classmethod
    def clean(cls) -> DetectionResult:
        """Result for a detector that found nothing."""
        return cls()

    @classmethod
    def spam(
        cls,
        agent: Agent,
        reason: str,
        count: Optional[int] = None,
        percentage: Optional[float] = None,
    ) -> DetectionResult:
        """Result for a detector that fired."""
        return cls(SpamLogEntry(agent=agent, reason=reason, count=count, percentage=percentage))


@dataclass(frozen=True)
class Verdict:
    """
    Final classification of a submission.

    The submission is spam exactly when the log is non-empty; there is
    no separate flag to keep in sync.
    """
    log: tuple[SpamLogEntry, ...] = field(default_factory=tuple)

    @property
    def is_spam(self) -> bool:
        return bool(self.log)

    @property
    def reasons(self) -> list[str]:
        return [entry.reason for entry in self.log]

    def to_dict(self) -> dict[str, Any]:
        """Serialize the verdict and its audit trail."""
        return {
            "spam": self.is_spam,
            "log": [entry.to_dict() for entry in self.log],
        }
