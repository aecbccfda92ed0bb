"""Credential signature table.

Signatures are compiled once at import time. A signature that fails to
compile raises ``re.error`` on import, so a broken table never reaches a
running scan.
"""

import re

from keyguard.models import Pattern, Severity


def _pattern(
    name: str,
    regex: str,
    severity: Severity,
    provider: str,
    description: str,
) -> Pattern:
    return Pattern(
        name=name,
        matcher=re.compile(regex),
        severity=severity,
        provider=provider,
        description=description,
    )


# Table order is significant: findings within one blob are reported in
# this order.
PATTERNS: tuple[Pattern, ...] = (
    _pattern(
        "AWS Access Key",
        r"AKIA[0-9A-Z]{16}",
        Severity.CRITICAL,
        "AWS",
        "Amazon Web Services access key detected",
    ),
    _pattern(
        "GitHub Token",
        r"ghp_[a-zA-Z0-9]{36}",
        Severity.HIGH,
        "GitHub",
        "GitHub personal access token detected",
    ),
    _pattern(
        "GitHub OAuth",
        r"gho_[a-zA-Z0-9]{36}",
        Severity.HIGH,
        "GitHub",
        "GitHub OAuth token detected",
    ),
    _pattern(
        "OpenAI API Key",
        r"sk-[a-zA-Z0-9]{48}",
        Severity.HIGH,
        "OpenAI",
        "OpenAI API key detected",
    ),
    _pattern(
        "Stripe Secret Key",
        r"sk_live_[0-9a-zA-Z]{24}",
        Severity.CRITICAL,
        "Stripe",
        "Stripe secret API key detected",
    ),
    _pattern(
        "Stripe Publishable Key",
        r"pk_live_[0-9a-zA-Z]{24}",
        Severity.MEDIUM,
        "Stripe",
        "Stripe publishable API key detected",
    ),
    _pattern(
        "Google Cloud API Key",
        r"AIza[0-9A-Za-z\-_]{35}",
        Severity.HIGH,
        "Google Cloud",
        "Google Cloud Platform API key detected",
    ),
    _pattern(
        "Slack Token",
        r"xox[baprs]-[0-9a-zA-Z]{10,48}",
        Severity.HIGH,
        "Slack",
        "Slack API token detected",
    ),
    _pattern(
        "Discord Bot Token",
        r"[MN][A-Za-z\d]{23}\.[\w-]{6}\.[\w-]{27}",
        Severity.HIGH,
        "Discord",
        "Discord bot token detected",
    ),
    _pattern(
        "Twilio Account SID",
        r"AC[0-9a-fA-F]{32}",
        Severity.MEDIUM,
        "Twilio",
        "Twilio account SID detected",
    ),
    _pattern(
        "Twilio Auth Token",
        r"SK[0-9a-fA-F]{32}",
        Severity.CRITICAL,
        "Twilio",
        "Twilio API key detected",
    ),
    _pattern(
        "SendGrid API Key",
        r"SG\.[a-zA-Z0-9_\-]{22}\.[a-zA-Z0-9_\-]{43}",
        Severity.HIGH,
        "SendGrid",
        "SendGrid API key detected",
    ),
    _pattern(
        "Mailgun API Key",
        r"key-[a-zA-Z0-9]{32}",
        Severity.HIGH,
        "Mailgun",
        "Mailgun API key detected",
    ),
    _pattern(
        "Cloudinary URL",
        r"cloudinary://[0-9]{15}:[a-zA-Z0-9_\-]{27}@[a-zA-Z0-9_\-]+",
        Severity.MEDIUM,
        "Cloudinary",
        "Cloudinary URL with credentials detected",
    ),
    _pattern(
        "JWT Token",
        r"eyJ[a-zA-Z0-9_\-]*\.eyJ[a-zA-Z0-9_\-]*\.[a-zA-Z0-9_\-]*",
        Severity.HIGH,
        "Generic",
        "JSON Web Token detected",
    ),
    _pattern(
        "MongoDB Connection String",
        r"mongodb(?:\+srv)?://[a-zA-Z0-9._\-]+:[a-zA-Z0-9._\-]+@[a-zA-Z0-9._\-]+",
        Severity.CRITICAL,
        "MongoDB",
        "MongoDB connection string with credentials detected",
    ),
    _pattern(
        "Redis URL",
        r"redis://[a-zA-Z0-9._\-]*:[a-zA-Z0-9._\-]*@[a-zA-Z0-9._\-]+:[0-9]+",
        Severity.HIGH,
        "Redis",
        "Redis URL with credentials detected",
    ),
)


def get_pattern(name: str) -> Pattern | None:
    """Look up a signature by name."""
    for pattern in PATTERNS:
        if pattern.name == name:
            return pattern
    return None
