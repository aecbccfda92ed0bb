"""Pattern-based credential detection."""

import math
from collections import Counter
from collections.abc import Sequence

from keyguard.core.logging import get_logger
from keyguard.models import Finding, Pattern
from keyguard.scanners.patterns import PATTERNS

CONTEXT_RADIUS = 50
MASK_VISIBLE_CHARS = 4
MASK_MIN_LENGTH = 8

HIGH_ENTROPY_THRESHOLD = 4.5
MEDIUM_ENTROPY_THRESHOLD = 3.5


def mask(value: str) -> str:
    """Redact a secret, keeping at most the first and last four characters."""
    if len(value) <= MASK_MIN_LENGTH:
        return "*" * len(value)
    return value[:MASK_VISIBLE_CHARS] + "..." + value[-MASK_VISIBLE_CHARS:]


def shannon_entropy(value: str) -> float:
    """Base-2 Shannon entropy over character frequencies."""
    if not value:
        return 0.0

    length = len(value)
    return -sum(
        (count / length) * math.log2(count / length)
        for count in Counter(value).values()
    )


def confidence_from_entropy(entropy: float) -> float:
    if entropy > HIGH_ENTROPY_THRESHOLD:
        return 0.95
    if entropy > MEDIUM_ENTROPY_THRESHOLD:
        return 0.8
    return 0.6


def confidence_for(value: str) -> float:
    """Score how likely a match is a real secret rather than a placeholder."""
    return confidence_from_entropy(shannon_entropy(value))


def extract_context(content: str, start: int, end: int) -> str:
    """Snippet around a match, clipped to the content bounds."""
    return content[max(0, start - CONTEXT_RADIUS):min(len(content), end + CONTEXT_RADIUS)]


def line_number_at(content: str, position: int) -> int:
    """1-based line number of a character offset."""
    return content.count("\n", 0, position) + 1


def build_recommendation(key_type: str, provider: str) -> str:
    return (
        f"Immediately revoke this {key_type} from your {provider} dashboard "
        "and generate a new one. Store the new key securely using "
        "environment variables or a secrets manager."
    )


class Detector:
    """Applies the signature table to text blobs."""

    def __init__(self, patterns: Sequence[Pattern] = PATTERNS) -> None:
        self.logger = get_logger("detector")
        self.patterns = tuple(patterns)

    def detect(self, content: str, location: str) -> list[Finding]:
        """Find credentials in one blob.

        Findings are ordered by signature table order, then by match
        position within a signature.
        """
        findings: list[Finding] = []

        for pattern in self.patterns:
            for match in pattern.matcher.finditer(content):
                value = match.group(0)
                findings.append(
                    Finding(
                        key_type=pattern.name,
                        masked_value=mask(value),
                        location=location,
                        severity=pattern.severity,
                        confidence=confidence_for(value),
                        description=pattern.description,
                        provider=pattern.provider,
                        context=extract_context(content, match.start(), match.end()),
                        line_number=line_number_at(content, match.start()),
                        recommendation=build_recommendation(pattern.name, pattern.provider),
                    )
                )

        if findings:
            self.logger.debug(
                "credentials_detected",
                location=location,
                count=len(findings),
            )

        return findings


def detect(
    content: str,
    location: str,
    patterns: Sequence[Pattern] = PATTERNS,
) -> list[Finding]:
    """Shortcut for ``Detector(patterns).detect(content, location)``."""
    return Detector(patterns).detect(content, location)
