"""Credential scanning: signatures, detection and resource fetching."""

from keyguard.scanners.detector import Detector, detect, mask, shannon_entropy
from keyguard.scanners.fetcher import ContentFetcher, extract_references, resolve
from keyguard.scanners.patterns import PATTERNS

__all__ = [
    "Detector",
    "detect",
    "mask",
    "shannon_entropy",
    "ContentFetcher",
    "extract_references",
    "resolve",
    "PATTERNS",
]
