"""
Integration tests for GitHub API client, app authentication and status reporting.

These tests verify the GitHub integration layer works correctly
with real API responses (mocked for testing).
"""

import base64
from datetime import datetime

import jwt
import pytest
import requests
from unittest.mock import Mock, patch
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from chronicler.github.auth import AppCredentials
from chronicler.github.client import GitHubClient, GitHubAPIError, RateLimitExceeded
from chronicler.github.status import StatusHandler
from chronicler.models.pull_request import ChangedFile


PR_URL = "https://api.github.com/repos/octo/widgets/pulls/42"
REPO_URL = "https://api.github.com/repos/octo/widgets"
STATUSES_URL = "https://api.github.com/repos/octo/widgets/statuses/abc123"


def make_response(status_code=200, json_data=None, headers=None):
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = json_data
    response.content = b'{}' if json_data is not None else b''
    response.headers = headers or {'X-RateLimit-Remaining': '4999'}
    return response


def file_entries(count, prefix="src/file"):
    return [
        {'filename': f'{prefix}{i}.py', 'status': 'modified', 'additions': 1, 'deletions': 0}
        for i in range(count)
    ]


class TestGitHubClient:
    """Test GitHub API client functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.client = GitHubClient("test_token")

    def test_client_initialization(self):
        assert self.client.token == "test_token"
        assert self.client.base_url == "https://api.github.com"
        assert self.client.headers["Authorization"] == "token test_token"
        assert self.client.headers["Accept"] == "application/vnd.github.v3+json"

    @pytest.mark.parametrize("token", ["", None])
    def test_client_requires_token(self, token):
        with pytest.raises(ValueError):
            GitHubClient(token)

    @patch('requests.Session.request')
    def test_iter_pull_request_files_pages(self, mock_request):
        """Pages are requested in order until a short page."""
        mock_request.side_effect = [
            make_response(json_data=file_entries(30)),
            make_response(json_data=file_entries(5, prefix="lib/file")),
        ]

        pages = list(self.client.iter_pull_request_files(PR_URL))

        assert [len(page) for page in pages] == [30, 5]
        assert isinstance(pages[0][0], ChangedFile)
        assert pages[1][0].filename == "lib/file0.py"

        first_call, second_call = mock_request.call_args_list
        assert first_call.args == ('GET', f"{PR_URL}/files")
        assert first_call.kwargs['params'] == {'page': 1, 'per_page': 30}
        assert second_call.kwargs['params'] == {'page': 2, 'per_page': 30}

    @patch('requests.Session.request')
    def test_iter_pull_request_files_is_lazy(self, mock_request):
        mock_request.return_value = make_response(json_data=file_entries(30))

        pages = self.client.iter_pull_request_files(PR_URL)
        assert mock_request.call_count == 0

        next(pages)
        assert mock_request.call_count == 1

    @patch('requests.Session.request')
    def test_iter_pull_request_files_empty(self, mock_request):
        mock_request.return_value = make_response(json_data=[])

        assert list(self.client.iter_pull_request_files(PR_URL)) == []
        assert mock_request.call_count == 1

    @patch('requests.Session.request')
    def test_iter_pull_request_files_exact_multiple(self, mock_request):
        mock_request.side_effect = [
            make_response(json_data=file_entries(2)),
            make_response(json_data=[]),
        ]

        pages = list(self.client.iter_pull_request_files(PR_URL, per_page=2))

        assert len(pages) == 1
        assert mock_request.call_count == 2

    @patch('requests.Session.request')
    def test_get_file_contents(self, mock_request):
        content = base64.b64encode(b"productionFiles:\n  include: ['app/**']\n").decode('ascii')
        mock_request.return_value = make_response(json_data={
            'type': 'file',
            'encoding': 'base64',
            'content': content,
        })

        result = self.client.get_file_contents(REPO_URL, "main", ".starchart-labs/chronicler.yml")

        assert result == "productionFiles:\n  include: ['app/**']\n"
        call = mock_request.call_args
        assert call.args == ('GET', f"{REPO_URL}/contents/.starchart-labs/chronicler.yml")
        assert call.kwargs['params'] == {'ref': 'main'}

    @patch('requests.Session.request')
    def test_get_file_contents_not_found(self, mock_request):
        mock_request.return_value = make_response(404, {'message': 'Not Found'})

        assert self.client.get_file_contents(REPO_URL, "main", "missing.yml") is None

    @patch('requests.Session.request')
    def test_get_file_contents_directory(self, mock_request):
        mock_request.return_value = make_response(json_data=[{'type': 'file', 'name': 'a.yml'}])

        assert self.client.get_file_contents(REPO_URL, "main", ".starchart-labs") is None

    @patch('requests.Session.request')
    def test_api_error(self, mock_request):
        mock_request.return_value = make_response(500, {'message': 'Server Error'})

        with pytest.raises(GitHubAPIError) as exc_info:
            self.client.get_file_contents(REPO_URL, "main", "file.yml")

        assert exc_info.value.status_code == 500
        assert 'Server Error' in str(exc_info.value)

    @patch('requests.Session.request')
    def test_rate_limit_handling(self, mock_request):
        mock_request.return_value = make_response(429, headers={
            'X-RateLimit-Reset': str(int(datetime.now().timestamp()) + 3600)
        })

        with pytest.raises(RateLimitExceeded):
            next(self.client.iter_pull_request_files(PR_URL))

    @patch('requests.Session.request')
    def test_low_rate_limit_blocks_requests(self, mock_request):
        mock_request.return_value = make_response(json_data=[], headers={
            'X-RateLimit-Remaining': '5',
            'X-RateLimit-Reset': str(int(datetime.now().timestamp()) + 3600)
        })

        self.client.get_pull_request_files_page(PR_URL, 1)

        with pytest.raises(RateLimitExceeded):
            self.client.get_pull_request_files_page(PR_URL, 2)

    @patch('requests.Session.request')
    def test_network_error(self, mock_request):
        mock_request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(GitHubAPIError, match="Request failed"):
            self.client.get_pull_request_files_page(PR_URL, 1)

    @patch('requests.Session.request')
    def test_create_status(self, mock_request):
        mock_request.return_value = make_response(201, {'state': 'success'})

        self.client.create_status(STATUSES_URL, 'success', 'Release notes updated', 'doc/chronicler')

        call = mock_request.call_args
        assert call.args == ('POST', STATUSES_URL)
        assert call.kwargs['json'] == {
            'state': 'success',
            'description': 'Release notes updated',
            'context': 'doc/chronicler',
        }


class TestStatusHandler:
    """Test commit status reporting."""

    def setup_method(self):
        """Set up test fixtures."""
        self.client = Mock()
        self.handler = StatusHandler("doc/chronicler", STATUSES_URL, self.client)

    @pytest.mark.parametrize("state", ["pending", "success", "failure", "error"])
    def test_states(self, state):
        self.handler.send(state, "description")

        self.client.create_status.assert_called_once_with(STATUSES_URL, state, "description", "doc/chronicler")

    def test_long_description_truncated(self):
        self.handler.send("failure", "x" * 200)

        description = self.client.create_status.call_args.args[2]
        assert len(description) == 140
        assert description.endswith("...")


class TestAppCredentials:
    """Test GitHub App authentication."""

    def setup_method(self):
        """Set up test fixtures."""
        self.key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        pem = self.key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ).decode('ascii')
        self.credentials = AppCredentials(app_id="12345", private_key=pem)

    def test_create_jwt(self):
        token = self.credentials.create_jwt()

        claims = jwt.decode(token, self.key.public_key(), algorithms=["RS256"])
        assert claims["iss"] == "12345"
        assert claims["exp"] - claims["iat"] == 11 * 60

    def test_app_client_uses_bearer(self):
        client = self.credentials.app_client()

        assert client.headers["Authorization"].startswith("Bearer ")

    def test_repr_hides_private_key(self):
        assert "PRIVATE KEY" not in repr(self.credentials)

    def test_from_key_file(self, tmp_path):
        key_file = tmp_path / "app.pem"
        key_file.write_text(self.credentials.private_key, encoding='utf-8')

        credentials = AppCredentials.from_key_file("12345", str(key_file))

        assert credentials.private_key == self.credentials.private_key

    @patch('requests.Session.request')
    def test_client_for_repository(self, mock_request):
        mock_request.side_effect = [
            make_response(json_data={'id': 7}),
            make_response(201, {'token': 'ghs_installation'}),
        ]

        client = self.credentials.client_for_repository(REPO_URL)

        assert client.token == 'ghs_installation'
        assert client.headers["Authorization"] == "token ghs_installation"
        installation_call, token_call = mock_request.call_args_list
        assert installation_call.args == ('GET', f"{REPO_URL}/installation")
        assert token_call.args == ('POST', "https://api.github.com/app/installations/7/access_tokens")
