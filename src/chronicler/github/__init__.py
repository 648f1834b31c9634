"""
GitHub Integration Layer

This module provides GitHub API integration for changed-file paging,
repository configuration reads, commit statuses, app authentication,
and webhook handling.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .auth import AppCredentials
from .parser import WebhookPayloadParser, WebhookPayloadError
from .status import StatusHandler
from .webhooks import WebhookEventConverter, WebhookSignatureError, verify_signature

__all__ = [
    'GitHubClient',
    'GitHubAPIError',
    'RateLimitExceeded',
    'AppCredentials',
    'WebhookPayloadParser',
    'WebhookPayloadError',
    'StatusHandler',
    'WebhookEventConverter',
    'WebhookSignatureError',
    'verify_signature',
]
