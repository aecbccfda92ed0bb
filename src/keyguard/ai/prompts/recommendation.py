"""Remediation prompt templates."""

SYSTEM_PROMPT = (
    "You are a cybersecurity expert specializing in API key security. "
    "Provide specific, actionable recommendations for fixing exposed API keys."
)

RECOMMENDATION_PROMPT = """Security Scan Results for: {url}

Exposed API Keys Found:
{findings}

Please provide:
1. Immediate remediation steps for each finding
2. Best practices to prevent future exposures
3. Security implementation recommendations
4. Risk assessment and priority guidance

Format the response in clear sections with actionable steps.
"""
