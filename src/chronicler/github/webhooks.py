"""
GitHub webhook handling: signature checks and event routing.
"""

import hmac
import hashlib
import logging
from typing import Callable, Optional, Union

from ..models.events import EventKind, PingEvent, UnrecognizedEvent, WebhookEvent
from ..models.pull_request import PullRequestEvent
from .parser import WebhookPayloadParser


logger = logging.getLogger(__name__)

EVENT_TYPE_HEADER = "X-GitHub-Event"
EVENT_ID_HEADER = "X-GitHub-Delivery"
SIGNATURE_256_HEADER = "X-Hub-Signature-256"
SIGNATURE_HEADER = "X-Hub-Signature"


class WebhookSignatureError(Exception):
    """Webhook signature missing or does not match the body"""


def verify_signature(payload_body: bytes, secret_token: str, signature_header: Optional[str]) -> bool:
    """
    Verify that the payload was sent from GitHub by validating its HMAC signature.

    Args:
        payload_body: raw request body bytes
        secret_token: the webhook secret
        signature_header: ``sha256=...`` (X-Hub-Signature-256) or legacy ``sha1=...``

    Returns:
        True if the signature is valid, False otherwise.
    """
    if not signature_header or '=' not in signature_header:
        return False

    algorithm, _, signature = signature_header.partition('=')
    digestmod = {'sha256': hashlib.sha256, 'sha1': hashlib.sha1}.get(algorithm)
    if digestmod is None:
        return False

    expected = hmac.new(secret_token.encode('utf-8'), msg=payload_body, digestmod=digestmod).hexdigest()
    return hmac.compare_digest(expected, signature)


class WebhookEventConverter:
    """
    Routes webhook events by type.

    Pull request events whose action may have changed the file list are
    returned for analysis; installation events are counted through the
    injected recorder; everything else is logged and dropped.
    """

    def __init__(
        self,
        installation_recorder: Callable[[int], None],
        parser: Optional[WebhookPayloadParser] = None
    ):
        self.installation_recorder = installation_recorder
        self.parser = parser or WebhookPayloadParser()

    def parse_event(self, event_type: str, body: Union[str, bytes]) -> WebhookEvent:
        """
        Resolve a raw webhook into an event record.

        Raises:
            WebhookPayloadError: If the body cannot be parsed
        """
        kind = EventKind.from_header(event_type)

        if kind is EventKind.UNRECOGNIZED:
            return UnrecognizedEvent(event_type=event_type)

        payload = self.parser.load(body)

        if kind is EventKind.PING:
            return self.parser.parse_ping(payload)
        if kind is EventKind.PULL_REQUEST:
            return self.parser.parse_pull_request(payload)
        return self.parser.parse_installation(kind, payload)

    def handle_event(self, event_type: str, body: Union[str, bytes]) -> Optional[PullRequestEvent]:
        """
        Process a webhook event.

        Args:
            event_type: The X-GitHub-Event header value
            body: Raw webhook body

        Returns:
            Pull request event to analyze, or None when no analysis is needed
        """
        event = self.parse_event(event_type, body)

        if isinstance(event, UnrecognizedEvent):
            logger.debug(f"Received unhandled event type: {event.event_type}")
            return None

        if isinstance(event, PullRequestEvent):
            logger.info(f"Received pull request event ({event.loggable_repository_name}, pr:{event.action})")
            return event if event.is_commit_change else None

        if isinstance(event, PingEvent):
            logger.info(f"GitHub Ping: {event.zen}")
            return None

        for repository in event.loggable_repository_names:
            logger.info(f"GitHub Install: {event.action}: {repository}")

        if not event.loggable_repository_names:
            logger.info(f"GitHub Account Install: {event.action}: {event.account_name}")

        if event.is_installation:
            self.installation_recorder(len(event.loggable_repository_names))

        return None
