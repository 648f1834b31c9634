"""
GitHub App authentication utilities.
"""

import time
import logging
from dataclasses import dataclass
from pathlib import Path

import jwt

from .client import GitHubClient, USER_AGENT


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppCredentials:
    """GitHub App id and private key used to mint installation tokens"""
    app_id: str
    private_key: str
    base_url: str = "https://api.github.com"
    timeout_seconds: int = 30
    user_agent: str = USER_AGENT

    def __repr__(self) -> str:
        return f"AppCredentials(app_id={self.app_id!r})"

    @classmethod
    def from_key_file(cls, app_id: str, private_key_path: str, **kwargs) -> "AppCredentials":
        return cls(app_id=app_id, private_key=Path(private_key_path).read_text(encoding='utf-8'), **kwargs)

    def create_jwt(self) -> str:
        """Signed app JWT, valid for ten minutes"""
        now = int(time.time())
        payload = {
            "iat": now - 60,
            "exp": now + (10 * 60),
            "iss": str(self.app_id),
        }
        return jwt.encode(payload, self.private_key, algorithm="RS256")

    def app_client(self) -> GitHubClient:
        """Client authenticated as the app itself"""
        return GitHubClient(
            self.create_jwt(),
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            user_agent=self.user_agent,
            auth_scheme="Bearer",
        )

    def installation_token(self, repository_url: str) -> str:
        """
        Issue an installation access token for a repository.

        Args:
            repository_url: API URL of a repository the app is installed on

        Returns:
            Installation access token
        """
        client = self.app_client()
        installation = client.get_repository_installation(repository_url)
        logger.debug(f"Issuing token for installation {installation['id']}")
        return client.create_installation_token(installation['id'])

    def client_for_repository(self, repository_url: str) -> GitHubClient:
        """Client authenticated as the app installation on a repository"""
        return GitHubClient(
            self.installation_token(repository_url),
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            user_agent=self.user_agent,
        )
