"""
Webhook Event Models

웹훅 이벤트 종류와 이벤트별 데이터 모델
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from .pull_request import PullRequestEvent


class EventKind(Enum):
    """Recognized values of the webhook event-type header"""
    PING = "ping"
    PULL_REQUEST = "pull_request"
    INSTALLATION = "installation"
    INSTALLATION_REPOSITORIES = "installation_repositories"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_header(cls, event_type: str) -> "EventKind":
        """Resolve a header value, falling back to UNRECOGNIZED"""
        try:
            kind = cls(event_type.strip())
        except ValueError:
            return cls.UNRECOGNIZED
        return kind


@dataclass(frozen=True)
class PingEvent:
    """Sent once when a webhook is configured"""
    zen: str


@dataclass(frozen=True)
class InstallationEvent:
    """
    App installation change.

    Used for both ``installation`` and ``installation_repositories`` events;
    ``kind`` records which one was received.
    """
    kind: EventKind
    action: str
    account_name: str
    loggable_repository_names: Tuple[str, ...]

    @property
    def is_installation(self) -> bool:
        """Whether the event adds the app to repositories"""
        if self.kind is EventKind.INSTALLATION:
            return self.action == 'created'
        return self.action == 'added'


@dataclass(frozen=True)
class UnrecognizedEvent:
    """Event type this service does not handle"""
    event_type: str


WebhookEvent = Union[PingEvent, PullRequestEvent, InstallationEvent, UnrecognizedEvent]
