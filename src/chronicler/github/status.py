"""
Commit Status Reporting

Posts commit statuses (pending, success, failure, error) for a pull request head commit.
"""

import logging
from typing import Dict

from .client import GitHubClient


logger = logging.getLogger(__name__)

# GitHub rejects longer descriptions
MAX_DESCRIPTION_LENGTH = 140


class StatusHandler:
    """Reports statuses for one commit under a fixed context."""

    def __init__(self, context: str, statuses_url: str, client: GitHubClient):
        self.context = context
        self.statuses_url = statuses_url
        self.client = client

    def send(self, state: str, description: str) -> Dict:
        """Post a status, truncating the description to GitHub's limit"""
        if len(description) > MAX_DESCRIPTION_LENGTH:
            description = description[:MAX_DESCRIPTION_LENGTH - 3] + '...'
        return self.client.create_status(self.statuses_url, state, description, self.context)
