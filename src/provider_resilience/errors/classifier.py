"""
Provider error classification.

Classification is an ordered rule table evaluated first-match-wins against
the lower-cased message and details of a ProviderError:

    1. RATE_LIMITED       quota / 429 / "please retry in" vocabulary
    2. MODEL_UNAVAILABLE  unknown model or unsupported response format
    3. TRANSIENT          timeouts, network resets, 502/503/504
    4. FATAL              anything else

Order matters. Providers report a rate limit on a model with text that can
also mention the model ("... not found in quota bucket"), and a capability
error can mention a temporary condition; the earlier rule wins in both
cases. The vocabularies are loose heuristics over free text, kept as data
so a new provider's phrasing can be added without touching control flow.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

import structlog

from provider_resilience.errors.categories import ErrorCategory
from provider_resilience.errors.exceptions import ProviderError
from provider_resilience.models.enums import ErrorKind

logger = structlog.get_logger(__name__)

# "Please retry in 12.5s", "retry in 3s" - Gemini quota errors carry this hint
RETRY_AFTER_PATTERN = re.compile(r"retry in (\d*\.?\d+)s", re.IGNORECASE)

GEMINI_FREE_TIER_QUOTA = "generativelanguage.googleapis.com/generate_content_free_tier_requests"


@dataclass(frozen=True)
class ClassificationRule:
    """
    One row of the classification table.

    Attributes:
        kind: Category produced when the rule matches
        indicators: Substrings searched for in message + details (case-insensitive)
        status_codes: HTTP statuses that match regardless of text
    """

    kind: ErrorKind
    indicators: tuple[str, ...]
    status_codes: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "indicators", tuple(i.lower() for i in self.indicators))
        object.__setattr__(self, "status_codes", frozenset(self.status_codes))

    def matches(self, haystack: str, http_status: Optional[int] = None) -> bool:
        if http_status is not None and http_status in self.status_codes:
            return True
        return any(indicator in haystack for indicator in self.indicators)


DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        kind=ErrorKind.RATE_LIMITED,
        indicators=(
            "quota exceeded",
            "rate limit",
            "too many requests",
            "429",
            "please retry in",
            GEMINI_FREE_TIER_QUOTA,
        ),
        status_codes=frozenset({429}),
    ),
    ClassificationRule(
        kind=ErrorKind.MODEL_UNAVAILABLE,
        indicators=(
            "not found",
            "is not found",
            "not supported",
            "json_schema",
            "does not support response format",
            "response format",
        ),
    ),
    ClassificationRule(
        kind=ErrorKind.TRANSIENT,
        indicators=(
            "timeout",
            "network",
            "econnreset",
            "etimedout",
            "eai_again",
            "temporary",
            "503",
            "502",
            "504",
        ),
        status_codes=frozenset({502, 503, 504}),
    ),
)


def extract_retry_after(error: ProviderError) -> Optional[float]:
    """Return the "retry in <n>s" hint in seconds, message first, then details."""
    for text in (error.message, error.details):
        if not text:
            continue
        match = RETRY_AFTER_PATTERN.search(text)
        if match:
            return float(match.group(1))
    return None


class ErrorClassifier:
    """
    Maps a ProviderError to an ErrorCategory using an ordered rule table.

    Instances are immutable and safe to share between concurrent
    invocations. ``classify`` is suitable as ``RetryPolicy.classify``.
    """

    def __init__(self, rules: Iterable[ClassificationRule] = DEFAULT_RULES):
        self.rules: tuple[ClassificationRule, ...] = tuple(rules)

    def classify(self, error: BaseException) -> ErrorCategory:
        """
        Classify a provider failure.

        Args:
            error: ProviderError, or any exception (coerced first)

        Returns:
            ErrorCategory of the first matching rule, FATAL when none match
        """
        provider_error = ProviderError.coerce(error)
        haystack = f"{provider_error.message} {provider_error.details or ''}".lower()

        for rule in self.rules:
            if not rule.matches(haystack, provider_error.http_status):
                continue
            if rule.kind is ErrorKind.RATE_LIMITED:
                return ErrorCategory.rate_limited(extract_retry_after(provider_error))
            return ErrorCategory(rule.kind)

        return ErrorCategory(ErrorKind.FATAL)

    def with_indicators(self, kind: ErrorKind, *indicators: str) -> "ErrorClassifier":
        """
        Return a new classifier whose ``kind`` rule also matches ``indicators``.

        A kind without a rule in the table gets a new rule appended after
        the existing ones, so it never overrides earlier categories.
        """
        rules = list(self.rules)
        for index, rule in enumerate(rules):
            if rule.kind is kind:
                rules[index] = ClassificationRule(
                    kind=kind,
                    indicators=rule.indicators + tuple(indicators),
                    status_codes=rule.status_codes,
                )
                break
        else:
            rules.append(ClassificationRule(kind=kind, indicators=tuple(indicators)))

        logger.debug(
            "Classifier vocabulary extended",
            kind=kind.value,
            added=list(indicators),
        )
        return ErrorClassifier(rules)


_default_classifier = ErrorClassifier()


def classify_error(error: BaseException) -> ErrorCategory:
    """Classify with the default rule table."""
    return _default_classifier.classify(error)
