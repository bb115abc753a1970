"""
Authentication service for pluginpub.

Holds a GitHub access token that has been verified against the API in the
same call. Tokens come from the config store when a valid one is saved
there, otherwise from a fresh OAuth Device Authorization Grant.
"""

import logging
from typing import Any, Callable, Dict, Optional

import click

from .. import render
from ..config import load_config
from ..domain.github import GitHubUser
from ..domain.token import AccessToken
from ..exit_codes import AuthError, RemoteAPIError
from ..infra.config_store import ConfigStore
from ..infra.github_client import GitHubClient
from ..infra.oauth_client import (
    AuthorizationPending,
    DeviceCode,
    DeviceFlowClient,
    EmptyResponse,
    ExpiredToken,
    SlowDown,
    TokenError,
    TokenGranted,
)
from ..polling import CancelToken, Sleeper, pause

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10
SLOW_DOWN_STEP = 5


def open_in_browser(url: str) -> bool:
    """Try to open url in the platform browser. Returns False on failure."""
    try:
        return click.launch(url) == 0
    except OSError as e:
        logger.debug(f"Opening browser failed: {e}")
        return False


class AuthSessionManager:
    """
    Obtains and validates the bearer token used for every remote call.

    Example:
        manager = AuthSessionManager(config, ConfigStore(token_path))
        token = manager.ensure_token()
        user = manager.user  # validated identity
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        store: Optional[ConfigStore] = None,
        oauth: Optional[DeviceFlowClient] = None,
        api_factory: Optional[Callable[[str], GitHubClient]] = None,
        browser: Callable[[str], bool] = open_in_browser,
        sleep: Optional[Sleeper] = None,
        cancel: Optional[CancelToken] = None
    ):
        """
        Initialize AuthSessionManager.

        Args:
            config: Configuration dict (loads default if None)
            store: Where the token is persisted
            oauth: Device-flow endpoint client
            api_factory: Builds an API client for a token (used to validate it)
            browser: Opens the verification URL; returns False on failure
            sleep: Replacement for time.sleep between polls
            cancel: Token checked between polls
        """
        self.config = config or load_config()
        github = self.config.get('github', {})
        self.store = store or ConfigStore(self.config['paths']['token_file'])
        self.oauth = oauth or DeviceFlowClient(
            client_id=github['client_id'],
            scope=github.get('scope', 'user repo'),
            oauth_url=github.get('oauth_url', 'https://github.com'),
            user_agent=github.get('user_agent', 'pluginpub-cli'),
            timeout=github.get('timeout_seconds', 30),
        )
        self.api_factory = api_factory or (lambda token: GitHubClient.from_config(token, self.config))
        self.browser = browser
        self.sleep = sleep
        self.cancel = cancel
        self.default_interval = github.get('default_poll_interval', DEFAULT_POLL_INTERVAL)
        self.slow_down_step = github.get('slow_down_step', SLOW_DOWN_STEP)
        self.user: Optional[GitHubUser] = None

    def validate(self, token: AccessToken) -> GitHubUser:
        """Probe the "who am I" endpoint with token."""
        try:
            user = self.api_factory(token.access_token).get_current_user()
        except RemoteAPIError as e:
            raise AuthError(f"Token validation failed: {e}") from e
        self.user = user
        return user

    def ensure_token(self) -> AccessToken:
        """
        Return a token verified against the API during this call.

        A stored token that fails validation is deleted and replaced by a
        new device-flow session.

        Raises:
            AuthError: The device flow could not complete
        """
        token = self.store.get_token()
        if token is not None:
            try:
                self.validate(token)
                logger.debug(f"Reusing stored token for {self.user.login}")
                return token
            except AuthError as e:
                logger.warning(f"{e}")
                render.warning("Stored token is no longer valid, re-authenticating")
                self.store.clear_token()

        token = self.start_device_flow()
        self.store.save_token(token)
        return token

    def logout(self) -> bool:
        """Forget the stored token. Returns True if one was stored."""
        self.user = None
        return self.store.clear_token()

    def _present(self, code: DeviceCode) -> None:
        render.render_device_code(code.user_code, code.verification_uri)
        if not self.browser(code.verification_uri):
            render.render_manual_open(code.verification_uri)

    def start_device_flow(self) -> AccessToken:
        """
        Run the Device Authorization Grant until success or a terminal error.

        There is no overall timeout: the server ends the session with
        expired_token. Each poll is preceded by one interval of waiting.
        """
        render.info("Starting GitHub device authorization...")
        code = self.oauth.request_device_code()
        interval = code.interval or self.default_interval

        self._present(code)
        render.info("Waiting for authorization...")

        polls = 0
        while True:
            pause(interval, sleep=self.sleep, cancel=self.cancel)
            result = self.oauth.poll_token(code.device_code)
            polls += 1

            if isinstance(result, TokenGranted):
                user = self.validate(result.token)
                logger.info(f"Authorized as {user.login} after {polls} polls")
                render.success(f"Authenticated as {user.login}")
                return result.token

            if isinstance(result, AuthorizationPending):
                continue

            if isinstance(result, SlowDown):
                interval += self.slow_down_step
                logger.debug(f"Server asked to slow down, interval now {interval}s")
                continue

            if isinstance(result, ExpiredToken):
                raise AuthError("The device code has expired, please try again")

            if isinstance(result, TokenError):
                raise AuthError(f"Authorization failed: {result.description}")

            if isinstance(result, EmptyResponse):
                logger.debug("Token endpoint returned neither token nor error")
                continue

            raise AuthError(f"Unexpected token response: {result!r}")
