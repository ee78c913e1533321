"""
Configuration checks for outbound integrations (email and Slack).

Only the configuration is inspected here; nothing is sent.
"""

from . import settings


def email_configured() -> bool:
    """Email is usable once an SMTP host and port are set."""
    return bool(settings.get("email-smtp-host")) and settings.get("email-smtp-port") is not None


def slack_configured() -> bool:
    """Slack is usable once a bot token is set."""
    return bool(settings.get("slack-token"))
