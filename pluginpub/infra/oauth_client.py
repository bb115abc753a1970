"""
OAuth Device Authorization Grant endpoints (github.com/login/...).

Token-endpoint responses are decoded into a closed set of result types so
the polling loop branches on types rather than on raw dict contents:

    TokenGranted | AuthorizationPending | SlowDown | ExpiredToken
    | TokenError | EmptyResponse
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests

from ..domain.token import AccessToken
from ..exit_codes import AuthError

logger = logging.getLogger(__name__)

GITHUB_OAUTH_URL = "https://github.com"
DEVICE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"


@dataclass(frozen=True)
class DeviceCode:
    """Response to a device-code request."""
    device_code: str
    user_code: str
    verification_uri: str
    interval: Optional[int] = None  # seconds; None when the server omits it
    expires_in: Optional[int] = None


@dataclass(frozen=True)
class TokenGranted:
    token: AccessToken


@dataclass(frozen=True)
class AuthorizationPending:
    pass


@dataclass(frozen=True)
class SlowDown:
    pass


@dataclass(frozen=True)
class ExpiredToken:
    pass


@dataclass(frozen=True)
class TokenError:
    error: str
    description: str = ""


@dataclass(frozen=True)
class EmptyResponse:
    """Neither a token nor an error; keep polling."""


TokenPollResult = Union[
    TokenGranted, AuthorizationPending, SlowDown, ExpiredToken, TokenError, EmptyResponse
]


def decode_token_response(data: Dict[str, Any]) -> TokenPollResult:
    """Classify one token-endpoint response."""
    if not isinstance(data, dict):
        return EmptyResponse()

    if data.get('access_token'):
        return TokenGranted(AccessToken(
            access_token=data['access_token'],
            token_type=data.get('token_type', 'bearer'),
            scope=data.get('scope', ''),
        ))

    error = data.get('error')
    if not error:
        return EmptyResponse()
    if error == 'authorization_pending':
        return AuthorizationPending()
    if error == 'slow_down':
        return SlowDown()
    if error == 'expired_token':
        return ExpiredToken()
    return TokenError(error=error, description=data.get('error_description') or error)


class DeviceFlowClient:
    """
    HTTP side of the device flow. Holds no polling state.

    Example:
        client = DeviceFlowClient(client_id="...", scope="user repo")
        code = client.request_device_code()
        result = client.poll_token(code.device_code)
    """

    def __init__(
        self,
        client_id: str,
        scope: str,
        oauth_url: str = GITHUB_OAUTH_URL,
        user_agent: str = "pluginpub-cli",
        timeout: int = 30
    ):
        self.client_id = client_id
        self.scope = scope
        self.oauth_url = oauth_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': user_agent,
        })

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.oauth_url}/{path.lstrip('/')}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise AuthError(f"Device flow request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise AuthError(
                f"Cannot parse response from {url} (HTTP {response.status_code}): "
                f"{(response.text or '')[:200]}"
            ) from e

        if not isinstance(data, dict):
            raise AuthError(f"Unexpected response from {url}: {data!r}")
        return data

    def request_device_code(self) -> DeviceCode:
        """Start a device flow session."""
        data = self._post('login/device/code', {
            'client_id': self.client_id,
            'scope': self.scope,
        })

        if not data.get('device_code'):
            detail = data.get('error_description') or data.get('error') or data
            raise AuthError(f"Failed to obtain device code: {detail}")

        return DeviceCode(
            device_code=data['device_code'],
            user_code=data.get('user_code', ''),
            verification_uri=data.get('verification_uri', f"{self.oauth_url}/login/device"),
            interval=data.get('interval'),
            expires_in=data.get('expires_in'),
        )

    def poll_token(self, device_code: str) -> TokenPollResult:
        """Ask once whether the user has approved the device."""
        data = self._post('login/oauth/access_token', {
            'client_id': self.client_id,
            'device_code': device_code,
            'grant_type': DEVICE_GRANT_TYPE,
        })
        return decode_token_response(data)
