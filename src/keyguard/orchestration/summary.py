"""Severity tallies for scan findings."""

from collections.abc import Iterable

from keyguard.models import Finding, ScanSummary, Severity


def summarize(findings: Iterable[Finding]) -> ScanSummary:
    """Count findings per severity.

    ``total`` is the number of findings; a finding with an unrecognized
    severity counts toward ``total`` but no bucket.
    """
    counts = {severity.value: 0 for severity in Severity}
    total = 0

    for finding in findings:
        total += 1
        key = getattr(finding.severity, "value", finding.severity)
        if key in counts:
            counts[key] += 1

    return ScanSummary(total=total, **counts)
