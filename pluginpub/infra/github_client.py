"""
GitHub API client infrastructure for pluginpub.

Provides a typed wrapper over the slice of the GitHub REST API that
publishing needs:
- Authenticated user lookup (also used to validate tokens)
- Fork existence check and fork creation
- Pull request search by head ref, and creation

Every non-2xx response becomes a RemoteAPIError carrying the HTTP status,
so callers branch on `error.status` / `error.not_found` rather than on
message text.
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..domain.github import GitHubFork, GitHubUser, PullRequestRef
from ..exit_codes import RemoteAPIError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "pluginpub-cli"


def _server_message(response) -> str:
    """Best-effort `message` field of an error response."""
    try:
        data = response.json()
    except ValueError:
        return (response.text or "").strip() or response.reason or ""
    if isinstance(data, dict) and data.get('message'):
        return data['message']
    return str(data)


class GitHubClient:
    """
    GitHub REST client bound to one bearer token and one central repository.

    Example:
        client = GitHubClient(token, central_owner="ZToolsCenter",
                              central_repo="ZTools-plugins")
        user = client.get_current_user()
        fork = client.get_fork(user.login)
    """

    def __init__(
        self,
        token: str,
        central_owner: str,
        central_repo: str,
        api_url: str = GITHUB_API_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: int = 30
    ):
        """
        Initialize GitHubClient.

        Args:
            token: OAuth bearer token
            central_owner: Owner of the shared plugins repository
            central_repo: Name of the shared plugins repository
            api_url: API base URL
            user_agent: Fixed client identifier sent with every request
            timeout: HTTP request timeout in seconds
        """
        self.central_owner = central_owner
        self.central_repo = central_repo
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': user_agent,
        })

    @classmethod
    def from_config(cls, token: str, config: Dict[str, Any]) -> 'GitHubClient':
        github = config.get('github', {})
        return cls(
            token,
            central_owner=github['central_owner'],
            central_repo=github['central_repo'],
            api_url=github.get('api_url', GITHUB_API_URL),
            user_agent=github.get('user_agent', DEFAULT_USER_AGENT),
            timeout=github.get('timeout_seconds', 30),
        )

    @property
    def central_full_name(self) -> str:
        return f"{self.central_owner}/{self.central_repo}"

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Call the API and decode the JSON body.

        Returns:
            Decoded JSON, or None for 204 No Content

        Raises:
            RemoteAPIError: transport failure, non-2xx status or invalid JSON
        """
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RemoteAPIError(f"GitHub API request failed: {e}") from e

        status = response.status_code
        if status == 204:
            return None

        if not 200 <= status < 300:
            message = _server_message(response)
            logger.debug(f"GitHub API {method} {endpoint} -> {status}: {message}")
            raise RemoteAPIError(
                f"GitHub API error ({status}): {message}",
                status=status,
                server_message=message,
            )

        try:
            return response.json()
        except ValueError as e:
            raise RemoteAPIError(
                f"GitHub API returned invalid JSON for {endpoint}: {e}",
                status=status,
            ) from e

    def get_current_user(self) -> GitHubUser:
        """The user the token belongs to. Fails if the token is invalid."""
        data = self._request('GET', 'user')
        return GitHubUser.from_api_response(data or {})

    def get_fork(self, username: str) -> Optional[GitHubFork]:
        """
        The user's copy of the central repository.

        Returns:
            GitHubFork, or None if the user has no repository of that name
            or it belongs to someone else (e.g. a redirect after a rename)
        """
        try:
            data = self._request('GET', f"repos/{username}/{self.central_repo}")
        except RemoteAPIError as e:
            if e.not_found:
                return None
            raise

        fork = GitHubFork.from_api_response(data or {})
        if fork.owner != username:
            return None
        return fork

    def create_fork(self) -> GitHubFork:
        """
        Ask GitHub to fork the central repository.

        Forking is asynchronous; the returned fork may not be usable yet.
        """
        data = self._request('POST', f"repos/{self.central_full_name}/forks")
        return GitHubFork.from_api_response(data or {})

    def find_open_pull_request(self, head: str) -> Optional[PullRequestRef]:
        """
        Open pull request on the central repository whose head is `head`.

        Args:
            head: "<owner>:<branch>"
        """
        data = self._request(
            'GET',
            f"repos/{self.central_full_name}/pulls",
            params={'state': 'open', 'head': head},
        )
        if isinstance(data, list) and data:
            return PullRequestRef.from_api_response(data[0])
        return None

    def create_pull_request(self, head: str, title: str, body: str,
                            base: str = "main") -> PullRequestRef:
        data = self._request(
            'POST',
            f"repos/{self.central_full_name}/pulls",
            payload={
                'title': title,
                'head': head,
                'base': base,
                'body': body,
            },
        )
        return PullRequestRef.from_api_response(data or {}, created=True)
