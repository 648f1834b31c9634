"""
GitHub API Client

Handles GitHub API authentication, rate limiting, and communication.
Provides changed-file paging, repository file reads, and commit statuses.
"""

import base64
import time
import logging
from typing import Dict, Iterator, List, Optional
from datetime import datetime
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..models.pull_request import ChangedFile


logger = logging.getLogger(__name__)

USER_AGENT = 'Chronicler/1.0'


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client with authentication, rate limiting, and error handling.

    Provides methods for:
    - Paging through the files changed by a pull request
    - Reading a file from a repository branch
    - Posting commit statuses
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout_seconds: int = 30,
        user_agent: str = USER_AGENT,
        auth_scheme: str = "token"
    ):
        """
        Initialize GitHub client.

        Args:
            token: Installation access token or personal access token
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout_seconds: Per-request timeout
            user_agent: User-Agent header value
            auth_scheme: Authorization scheme ("token" or "Bearer")
        """
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.auth_scheme = auth_scheme
        self.session = self._create_session()
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    @property
    def headers(self) -> Dict[str, str]:
        return self.session.headers

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy and authentication."""
        session = requests.Session()

        # Configure retry strategy
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        # Set authentication headers
        session.headers.update({
            'Authorization': f'{self.auth_scheme} {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': self.user_agent
        })

        return session

    def _check_rate_limit(self) -> None:
        """Check and handle GitHub API rate limits."""
        if self.rate_limit_remaining <= 10 and datetime.now() < self.rate_limit_reset:
            wait_time = (self.rate_limit_reset - datetime.now()).total_seconds()
            if wait_time > 0:
                logger.warning(f"Rate limit low ({self.rate_limit_remaining}), resets in {wait_time:.1f}s")
                raise RateLimitExceeded(self.rate_limit_reset)

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _url(self, endpoint: str) -> str:
        # Webhook payloads carry absolute API URLs
        if endpoint.startswith(('http://', 'https://')):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API with rate limiting.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (relative to base URL, or absolute)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
        """
        self._check_rate_limit()

        url = self._url(endpoint)
        kwargs.setdefault('timeout', self.timeout_seconds)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}") from e

        self._update_rate_limit(response)

        if response.status_code == 429:
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def get_pull_request_files_page(self, pull_request_url: str, page: int, per_page: int = 30) -> List[ChangedFile]:
        """
        Get one page of the files changed in a pull request.

        Args:
            pull_request_url: API URL of the pull request
            page: 1-based page number
            per_page: Page size (GitHub allows at most 100)

        Returns:
            Changed files on the page
        """
        response = self._make_request(
            'GET',
            f"{pull_request_url.rstrip('/')}/files",
            params={'page': page, 'per_page': per_page}
        )
        return [ChangedFile.from_api(item) for item in response.json()]

    def iter_pull_request_files(self, pull_request_url: str, per_page: int = 30) -> Iterator[List[ChangedFile]]:
        """
        Lazily page through the files changed in a pull request.

        Each page is fetched only when the previous one has been consumed, so
        a caller that stops iterating issues no further requests.

        Args:
            pull_request_url: API URL of the pull request
            per_page: Page size (GitHub allows at most 100)

        Yields:
            Lists of changed files, one per page, starting at page 1
        """
        page = 1

        while True:
            logger.debug(f"Fetching page {page} of changed files")
            page_files = self.get_pull_request_files_page(pull_request_url, page, per_page)
            if not page_files:
                break

            yield page_files

            if len(page_files) < per_page:
                break

            page += 1

    def get_file_contents(self, repository_url: str, branch: str, path: str) -> Optional[str]:
        """
        Read a text file from a repository branch.

        Args:
            repository_url: API URL of the repository
            branch: Branch, tag or commit to read from
            path: File path within the repository

        Returns:
            Decoded file content, or None if the file does not exist
        """
        logger.info(f"Fetching {path} at {branch}")

        try:
            response = self._make_request(
                'GET',
                f"{repository_url.rstrip('/')}/contents/{path.lstrip('/')}",
                params={'ref': branch}
            )
        except GitHubAPIError as e:
            if e.status_code == 404:
                logger.info(f"File not found: {path}")
                return None
            raise

        data = response.json()
        if not isinstance(data, dict) or data.get('type', 'file') != 'file':
            logger.warning(f"{path} is not a file")
            return None

        content = data.get('content')
        if content is None:
            return None

        if data.get('encoding', 'base64') == 'base64':
            return base64.b64decode(content).decode('utf-8')
        return content

    def create_status(self, statuses_url: str, state: str, description: str, context: str) -> Dict:
        """
        Post a commit status.

        Args:
            statuses_url: Commit statuses URL from the pull request payload
            state: One of pending, success, failure, error
            description: Short human readable description
            context: Status context label

        Returns:
            Created status data
        """
        logger.info(f"Setting status {context} to {state}")

        response = self._make_request(
            'POST',
            statuses_url,
            json={'state': state, 'description': description, 'context': context}
        )
        return response.json()

    def get_repository_installation(self, repository_url: str) -> Dict:
        """
        Get the app installation for a repository (requires an app JWT).

        Args:
            repository_url: API URL of the repository

        Returns:
            Installation data
        """
        response = self._make_request('GET', f"{repository_url.rstrip('/')}/installation")
        return response.json()

    def create_installation_token(self, installation_id: int) -> str:
        """
        Exchange an app JWT for an installation access token.

        Args:
            installation_id: App installation id

        Returns:
            Installation access token
        """
        response = self._make_request('POST', f"/app/installations/{installation_id}/access_tokens")
        return response.json()['token']
