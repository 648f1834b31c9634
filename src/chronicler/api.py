"""
Main Chronicler API

Main interface that wires webhook handling, GitHub authentication,
and pull request analysis together.
"""

import logging
from typing import Optional, Union

from .analysis.analyzer import PullRequestAnalyzer
from .analysis.classifier import Verdict
from .analysis.settings import default_settings
from .config import AppConfig, get_config
from .github.auth import AppCredentials
from .github.client import GitHubClient
from .github.webhooks import WebhookEventConverter, WebhookSignatureError, verify_signature
from .installations import InstallationCounter
from .models.pull_request import PullRequestEvent


logger = logging.getLogger(__name__)


class ChroniclerAPI:
    """
    Main Chronicler API interface.

    Handles a webhook delivery end to end:
    1. Verify the webhook signature (when a secret is configured)
    2. Route the event; count installations
    3. Analyze commit-changing pull requests and report a commit status
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """
        Initialize Chronicler API.

        Args:
            config: Optional configuration object

        Raises:
            PackagingDefect: If the bundled default analysis settings are malformed
        """
        self.config = config or get_config()

        logger.info("Initializing Chronicler API components...")

        # Fail at startup rather than on the first pull request
        default_settings()

        self.credentials = None
        if self.config.github.uses_app_credentials:
            self.credentials = AppCredentials.from_key_file(
                self.config.github.app_id,
                self.config.github.private_key_path,
                base_url=self.config.github.api_base_url,
                timeout_seconds=self.config.github.timeout_seconds,
                user_agent=self.config.github.user_agent,
            )

        self.installations = InstallationCounter()
        self.converter = WebhookEventConverter(self.installations.record)
        self.analyzer = PullRequestAnalyzer(
            client_factory=self.client_for,
            settings_path=self.config.analysis.settings_path,
            page_size=self.config.analysis.page_size,
            status_context=self.config.analysis.status_context,
        )

        logger.info("Chronicler API initialized successfully")

    def client_for(self, event: PullRequestEvent) -> GitHubClient:
        """GitHub client authorized for the event's base repository"""
        if self.credentials is not None:
            return self.credentials.client_for_repository(event.base_repository_url)

        return GitHubClient(
            self.config.github.token,
            base_url=self.config.github.api_base_url,
            timeout_seconds=self.config.github.timeout_seconds,
            user_agent=self.config.github.user_agent,
        )

    def verify(self, body: bytes, signature_header: Optional[str]) -> None:
        """
        Check a webhook signature.

        Raises:
            WebhookSignatureError: If a secret is configured and the signature does not match
        """
        secret = self.config.github.webhook_secret
        if not secret:
            return

        if not verify_signature(body, secret, signature_header):
            raise WebhookSignatureError("Invalid webhook signature")

    def handle_webhook(
        self,
        event_type: str,
        body: Union[str, bytes],
        signature_header: Optional[str] = None
    ) -> Optional[Verdict]:
        """
        Process one webhook delivery.

        Args:
            event_type: The X-GitHub-Event header value
            body: Raw webhook body
            signature_header: X-Hub-Signature-256 (or X-Hub-Signature) header value

        Returns:
            Verdict if a pull request was analyzed, otherwise None

        Raises:
            WebhookSignatureError: For a bad signature
            WebhookPayloadError: For an unparseable body
            ConfigurationError: If the repository configuration is malformed
            ProcessingError: For any other analysis failure
        """
        raw_body = body.encode('utf-8') if isinstance(body, str) else body
        self.verify(raw_body, signature_header)

        event = self.converter.handle_event(event_type, raw_body)
        if event is None:
            return None

        return self.analyzer.analyze(event)
