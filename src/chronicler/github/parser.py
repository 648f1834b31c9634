"""
Webhook Payload Parser

Parses GitHub webhook JSON payloads into event models.
Handles pull request, installation, and ping payloads.
"""

import json
import logging
from typing import Any, Dict, List, Union

from ..models.events import EventKind, InstallationEvent, PingEvent
from ..models.pull_request import PullRequestEvent


logger = logging.getLogger(__name__)

PRIVATE_REPOSITORY_SUFFIX = "/<private repository>"


class WebhookPayloadError(ValueError):
    """Webhook body is not a valid payload for its event type"""


class WebhookPayloadParser:
    """
    Parser for GitHub webhook payloads.

    Converts raw webhook bodies into event records. Repository names of
    private repositories are masked so they can be logged safely.
    """

    def load(self, body: Union[str, bytes]) -> Dict[str, Any]:
        """
        Decode a webhook body.

        Raises:
            WebhookPayloadError: If the body is not a JSON object
        """
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise WebhookPayloadError(f"Invalid JSON body: {e}") from e

        if not isinstance(payload, dict):
            raise WebhookPayloadError("Webhook body must be a JSON object")

        return payload

    def parse_ping(self, payload: Dict[str, Any]) -> PingEvent:
        return PingEvent(zen=payload.get('zen', ''))

    def parse_pull_request(self, payload: Dict[str, Any]) -> PullRequestEvent:
        """
        Parse a ``pull_request`` payload.

        Args:
            payload: Decoded webhook body

        Returns:
            PullRequestEvent

        Raises:
            WebhookPayloadError: If a required field is missing
        """
        try:
            pull_request = payload['pull_request']
            base = pull_request['base']
            base_repo = base['repo']

            return PullRequestEvent(
                id=int(pull_request['id']),
                number=int(payload['number']),
                action=payload['action'],
                loggable_repository_name=self.loggable_repository_name(base_repo),
                pull_request_url=pull_request['url'],
                base_repository_url=base_repo['url'],
                base_ref=base['ref'],
                statuses_url=pull_request['statuses_url'],
                head_sha=pull_request['head']['sha'],
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise WebhookPayloadError(f"Malformed pull_request payload: {e!r}") from e

    def parse_installation(self, kind: EventKind, payload: Dict[str, Any]) -> InstallationEvent:
        """
        Parse an ``installation`` or ``installation_repositories`` payload.

        Raises:
            WebhookPayloadError: If a required field is missing
        """
        try:
            installation = payload['installation']
            account_name = installation['account']['login']

            if kind is EventKind.INSTALLATION:
                repositories = payload.get('repositories') or []
            elif payload['action'] == 'removed':
                repositories = payload.get('repositories_removed') or []
            else:
                repositories = payload.get('repositories_added') or []

            return InstallationEvent(
                kind=kind,
                action=payload['action'],
                account_name=account_name,
                loggable_repository_names=tuple(self._installation_repository_names(account_name, repositories)),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise WebhookPayloadError(f"Malformed {kind.value} payload: {e!r}") from e

    @staticmethod
    def loggable_repository_name(repository: Dict[str, Any]) -> str:
        """Full name of a public repository, or ``owner/<private repository>``"""
        if repository.get('private', True):
            return repository['owner']['login'] + PRIVATE_REPOSITORY_SUFFIX
        return repository['full_name']

    @staticmethod
    def _installation_repository_names(account_name: str, repositories: List[Dict[str, Any]]) -> List[str]:
        # Installation payloads list repositories without an owner object
        names = []
        for repository in repositories:
            if repository.get('private', True):
                names.append(account_name + PRIVATE_REPOSITORY_SUFFIX)
            else:
                names.append(repository['full_name'])
        return names
