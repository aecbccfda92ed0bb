"""Deterministic remediation reports used without an AI provider."""

from collections.abc import Sequence

from keyguard.models import Finding, Severity
from keyguard.orchestration.summary import summarize


def risk_level(findings: Sequence[Finding]) -> str:
    severities = {f.severity for f in findings}
    if Severity.CRITICAL in severities:
        return "HIGH"
    if Severity.HIGH in severities:
        return "MEDIUM-HIGH"
    return "MEDIUM"


def _immediate_actions(level: str) -> str:
    critical = (
        "### CRITICAL - Take Action Now\n"
        "Critical API keys detected. These keys must be revoked immediately\n"
        "to prevent unauthorized access and potential financial damage."
    )
    high = (
        "### HIGH PRIORITY - Fix Today\n"
        "High-severity keys detected that could lead to data breaches or service disruption."
    )
    if level == "HIGH":
        return f"{critical}\n\n{high}"
    if level == "MEDIUM-HIGH":
        return high
    return (
        "### No Critical Issues Found\n"
        "Medium and low severity issues detected. Address these to improve security posture."
    )


def fallback_report(findings: Sequence[Finding], url: str) -> str:
    """Remediation report used when the AI provider is unavailable."""
    summary = summarize(findings)
    level = risk_level(findings)
    fix_time = "1-2 hours" if summary.critical else "2-4 hours"
    priority = min(100, len(findings) * 10)

    return f"""# Security Recommendations for {url}

## Immediate Actions Required

{_immediate_actions(level)}

## Remediation Steps

### 1. Key Rotation Process
1. **Generate new keys** in your service provider dashboard
2. **Update environment variables** in your deployment system
3. **Revoke old keys** only after confirming new keys work
4. **Monitor logs** for any failed authentication attempts

### 2. Secure Storage Implementation
- Use environment variables for all API keys
- Implement proper secrets management (HashiCorp Vault, AWS Secrets Manager)
- Never commit keys to version control
- Use different keys for development, staging, and production

### 3. Code Security Best Practices
- Implement proper .gitignore rules for config files
- Use linting rules to detect potential key exposures
- Regular security audits of your codebase

## Risk Assessment

**Overall Risk Level**: {level}
**Estimated Fix Time**: {fix_time}
**Priority Score**: {priority}/100

## Findings Summary
- Critical: {summary.critical}
- High: {summary.high}
- Medium: {summary.medium}
- Low: {summary.low}

## Next Steps
1. Address critical findings immediately
2. Implement secure storage for all keys
3. Set up monitoring and alerting
4. Schedule regular security reviews
5. Add automated secret scanning to your CI/CD pipeline
"""


def no_findings_report(url: str) -> str:
    """Report for a scan that found nothing."""
    return f"""# Security Scan Results for {url}

## No Exposed Keys Detected

No exposed API keys were detected in the page, its scripts or its stylesheets.

## Recommendations for Continued Security

### 1. Regular Security Audits
- Schedule regular scans of public pages
- Add automated secret scanning to your CI/CD pipeline
- Scan dependencies for known vulnerabilities

### 2. Practices to Maintain
- Keep secrets in environment variables or a secrets manager
- Rotate keys on a schedule
- Keep .gitignore rules covering local config files
- Review client-side bundles for embedded credentials before release
"""
