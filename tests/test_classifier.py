"""
Tests for the classification pipeline.

Tests:
- Detector ordering and short-circuiting
- End-to-end submission scenarios
- Non-short-circuit mode
- Verdict and submission models
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from formguard.classifier import SpamClassifier, classify, get_classifier
from formguard.config import Config
from formguard.models import Agent, SpamLogEntry, Submission, Verdict

NOW = 1_000_000.0
CLEAN_MESSAGE = "Hello, I have a question about pricing. Thanks!"


def post(elapsed: int | None = 10, **fields: str) -> Submission:
    """
    Build a submission as a contact form would post it.

    Args:
        elapsed: Seconds between render and submit, or None to omit the timestamp
        fields: Field values; underscores in names become dashes
    """
    data = {name.replace("_", "-"): value for name, value in fields.items()}
    if elapsed is not None:
        data["cf7_timestamp"] = str(int(NOW) - elapsed)
    return Submission.from_mapping(data, received_at=NOW)


@pytest.fixture
def classifier() -> SpamClassifier:
    return SpamClassifier(Config())


class TestScenarios:
    """End-to-end submissions through the default pipeline."""

    def test_genuine_enquiry_is_not_spam(self, classifier: SpamClassifier) -> None:
        submission = post(your_website="", message=CLEAN_MESSAGE)
        verdict = classifier.classify(submission, NOW)
        assert not verdict.is_spam
        assert verdict.log == ()

    def test_filled_honeypot_is_spam(self, classifier: SpamClassifier) -> None:
        """Test that the honeypot alone decides, even without a timestamp."""
        submission = post(elapsed=None, your_website="http://spam.biz")
        verdict = classifier.classify(submission, NOW)
        assert verdict.is_spam
        assert len(verdict.log) == 1
        assert verdict.log[0].agent is Agent.HONEYPOT

    def test_quick_submission_is_spam(self, classifier: SpamClassifier) -> None:
        verdict = classifier.classify(post(elapsed=2, message=CLEAN_MESSAGE), NOW)
        assert verdict.is_spam
        assert verdict.log[0].agent is Agent.TIMESTAMP
        assert "too quickly" in verdict.log[0].reason

    def test_missing_timestamp_is_spam(self, classifier: SpamClassifier) -> None:
        verdict = classifier.classify(post(elapsed=None, message=CLEAN_MESSAGE), NOW)
        assert verdict.reasons == ["Timestamp field missing"]

    def test_expired_session_is_spam(self, classifier: SpamClassifier) -> None:
        verdict = classifier.classify(post(elapsed=7200, message=CLEAN_MESSAGE), NOW)
        assert verdict.reasons == ["Form session expired (7200 seconds old)"]

    def test_repetitive_message_is_spam(self) -> None:
        classifier = SpamClassifier(Config(min_words=1))
        verdict = classifier.classify(post(message="aaaaaaaaaa"), NOW)
        assert verdict.is_spam
        assert verdict.log[0].agent is Agent.CONTENT
        assert verdict.reasons == ["Repetitive text pattern detected"]

    def test_too_many_urls(self, classifier: SpamClassifier) -> None:
        message = "Great offers at http://a.example http://b.example http://c.example"
        verdict = classifier.classify(post(your_message=message), NOW)
        assert verdict.log[0].agent is Agent.CONTENT
        assert "3" in verdict.log[0].reason
        assert "1" in verdict.log[0].reason
        assert verdict.log[0].count == 3

    def test_shouted_keywords_report_caps(self, classifier: SpamClassifier) -> None:
        verdict = classifier.classify(post(message="BUY NOW CASINO WIN BIG"), NOW)
        assert verdict.reasons == ["Excessive uppercase text (100% caps, max 50% allowed)"]

    def test_form_without_message_skips_content(self, classifier: SpamClassifier) -> None:
        verdict = classifier.classify(post(your_name="Ada", your_email="ada@example.com"), NOW)
        assert not verdict.is_spam

    def test_message_field_priority(self, classifier: SpamClassifier) -> None:
        """Test that the first populated message field is the one analyzed."""
        submission = post(your_message="", message="casino", comment=CLEAN_MESSAGE)
        verdict = classifier.classify(submission, NOW)
        assert verdict.reasons == ["Message too short (1 words, min 3 required)"]


class TestPipelineOrder:
    """Tests for detector ordering and short-circuiting."""

    SPAMMY = {"your_website": "filled", "message": "BUY CHEAP PILLS NOW!!!"}

    def test_detector_order(self, classifier: SpamClassifier) -> None:
        assert [name for name, _ in classifier.detectors] == ["honeypot", "timing", "content"]

    @pytest.mark.parametrize("elapsed", [None, 0, 2, 99999])
    def test_honeypot_wins_regardless_of_other_fields(
        self, classifier: SpamClassifier, elapsed: int | None
    ) -> None:
        verdict = classifier.classify(post(elapsed=elapsed, **self.SPAMMY), NOW)
        assert [entry.agent for entry in verdict.log] == [Agent.HONEYPOT]

    def test_timing_wins_over_content(self, classifier: SpamClassifier) -> None:
        verdict = classifier.classify(post(elapsed=1, message="casino"), NOW)
        assert [entry.agent for entry in verdict.log] == [Agent.TIMESTAMP]

    def test_collect_all_when_not_short_circuiting(self) -> None:
        """Test that every firing detector is logged, in pipeline order."""
        classifier = SpamClassifier(Config(short_circuit=False))
        verdict = classifier.classify(post(elapsed=None, your_website="x", message="casino"), NOW)
        assert [entry.agent for entry in verdict.log] == [
            Agent.HONEYPOT,
            Agent.TIMESTAMP,
            Agent.CONTENT,
        ]
        assert verdict.reasons == [
            "Honeypot field was filled",
            "Timestamp field missing",
            "Message too short (1 words, min 3 required)",
        ]

    def test_collect_all_with_clean_submission(self) -> None:
        classifier = SpamClassifier(Config(short_circuit=False))
        verdict = classifier.classify(post(message=CLEAN_MESSAGE), NOW)
        assert not verdict.is_spam


class TestClassifierBehaviour:
    """Tests for determinism, defaults and the functional API."""

    def test_deterministic(self, classifier: SpamClassifier) -> None:
        submission = post(elapsed=2, message=CLEAN_MESSAGE)
        first = classifier.classify(submission, NOW)
        second = classifier.classify(submission, NOW)
        assert first == second

    def test_now_defaults_to_arrival_time(self, classifier: SpamClassifier) -> None:
        submission = post(elapsed=10, message=CLEAN_MESSAGE)
        assert not classifier.classify(submission).is_spam
        # The same submission classified much later has expired
        assert classifier.classify(submission, NOW + 7200).is_spam

    def test_submission_is_not_mutated(self, classifier: SpamClassifier) -> None:
        submission = post(your_website="filled", message=CLEAN_MESSAGE)
        before = dict(submission.fields)
        classifier.classify(submission, NOW)
        assert dict(submission.fields) == before

    @pytest.mark.parametrize("now", [float("nan"), float("inf")])
    def test_non_finite_now_rejected(self, classifier: SpamClassifier, now: float) -> None:
        submission = post(message=CLEAN_MESSAGE)
        with pytest.raises(ValueError, match="finite"):
            classifier.classify(submission, now)

    def test_long_genuine_message_is_fast(self, classifier: SpamClassifier) -> None:
        """Test that a long, innocuous message is classified well within a second."""
        message = " ".join(f"word{i}x" for i in range(2000))
        submission = post(message=message)
        started = time.perf_counter()
        verdict = classifier.classify(submission, NOW)
        assert time.perf_counter() - started < 1.0
        assert not verdict.is_spam

    def test_independent_configurations(self) -> None:
        """Test that differently configured classifiers coexist."""
        strict = SpamClassifier(Config(min_submit_seconds=30))
        lenient = SpamClassifier(Config())
        submission = post(elapsed=10, message=CLEAN_MESSAGE)
        assert strict.classify(submission, NOW).is_spam
        assert not lenient.classify(submission, NOW).is_spam

    def test_classify_function(self) -> None:
        submission = post(elapsed=10, message=CLEAN_MESSAGE)
        assert not classify(submission, now=NOW).is_spam
        assert classify(submission, Config(min_submit_seconds=30), NOW).is_spam

    def test_get_classifier_is_shared(self) -> None:
        assert get_classifier() is get_classifier()
        assert get_classifier().config == Config()


class TestModels:
    """Tests for submissions and verdicts."""

    def test_submission_coerces_values(self) -> None:
        submission = Submission.from_mapping(
            {"topics": ["sales", "support"], "count": 3, "empty": None},
            received_at=NOW,
        )
        assert submission.get("topics") == "sales, support"
        assert submission.get("count") == "3"
        assert submission.get("empty") == ""

    def test_submission_fields_are_read_only(self) -> None:
        submission = post(message="hi")
        with pytest.raises(TypeError):
            submission.fields["message"] = "changed"  # type: ignore[index]

    def test_submission_defaults_received_at(self) -> None:
        submission = Submission.from_mapping({})
        assert submission.received_at > 0

    def test_empty_verdict_is_not_spam(self) -> None:
        verdict = Verdict()
        assert not verdict.is_spam
        assert verdict.to_dict() == {"spam": False, "log": []}

    def test_verdict_to_dict(self) -> None:
        verdict = Verdict(log=(
            SpamLogEntry(Agent.TIMESTAMP, "Form submitted too quickly (2 seconds)", count=2),
            SpamLogEntry(Agent.CONTENT, "Excessive special characters (40% of message)",
                         percentage=40.0),
            SpamLogEntry(Agent.HONEYPOT, "Honeypot field was filled"),
        ))
        assert verdict.is_spam
        assert verdict.to_dict() == {
            "spam": True,
            "log": [
                {"agent": "timestamp", "reason": "Form submitted too quickly (2 seconds)",
                 "count": 2},
                {"agent": "content-analysis",
                 "reason": "Excessive special characters (40% of message)", "percentage": 40.0},
                {"agent": "honeypot", "reason": "Honeypot field was filled"},
            ],
        }
