"""
Bearer token acquisition for catalog lookups.

Two OAuth provider kinds are supported:

- earthdata: `GET <baseUrl>/token` with HTTP basic auth (username/password);
  the token is read from `message.token` (falling back to `access_token`).
- launchpad: `GET <launchpadApi>/gettoken` over TLS client-certificate auth,
  the certificate's key unlocked with the Launchpad passphrase; the token is
  read from `sm_token`.

A token is fetched once per discovery run, before any catalog lookup. A session
passed in by the caller is used as-is and left open; otherwise a private session
is opened for the request and closed afterwards.
"""

import ssl
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional

import requests
from requests.adapters import HTTPAdapter

from granule_discovery.config.settings import Settings
from granule_discovery.exceptions import AuthenticationError, ConfigurationError
from granule_discovery.utils.logging import get_logger

from .secrets import SecretResolver

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenConfig:
    """Credentials and endpoints used to obtain a bearer token."""

    base_url: str
    username: str = ""
    password: Optional[str] = None
    launchpad_passphrase: Optional[str] = None
    launchpad_api: str = ""
    launchpad_certificate: str = ""

    def __repr__(self) -> str:
        return (
            f"TokenConfig(base_url={self.base_url!r}, username={self.username!r}, "
            f"launchpad_api={self.launchpad_api!r})"
        )


class ClientCertificateAdapter(HTTPAdapter):
    """HTTPAdapter presenting a client certificate with an encrypted key."""

    def __init__(self, certificate: str, passphrase: Optional[str], **kwargs: Any):
        self._ssl_context = ssl.create_default_context()
        self._ssl_context.load_cert_chain(certificate, password=passphrase)
        super().__init__(**kwargs)

    def init_poolmanager(self, *args: Any, **kwargs: Any) -> None:
        kwargs["ssl_context"] = self._ssl_context
        super().init_poolmanager(*args, **kwargs)


@contextmanager
def _session_scope(session: Optional[requests.Session]) -> Iterator[requests.Session]:
    if session is not None:
        yield session
        return
    with requests.Session() as owned:
        yield owned


def _get(session: requests.Session, endpoint: str, **kwargs: Any) -> requests.Response:
    try:
        return session.get(endpoint, **kwargs)
    except requests.RequestException as exc:
        raise AuthenticationError(
            f"Token request to {endpoint} failed: {exc}", original_error=exc
        ) from exc


def _json_body(response: requests.Response, endpoint: str) -> Dict[str, Any]:
    if response.status_code != 200:
        raise AuthenticationError(
            f"Token request to {endpoint} failed with status {response.status_code}"
        )
    try:
        body = response.json()
    except ValueError as exc:
        raise AuthenticationError(
            f"Token response from {endpoint} is not valid JSON",
            original_error=exc,
        ) from exc
    if not isinstance(body, dict):
        raise AuthenticationError(f"Unexpected token response from {endpoint}")
    return body


def fetch_earthdata_token(
    config: TokenConfig, timeout: int = 30, session: Optional[requests.Session] = None
) -> str:
    """Obtain a token from the catalog's Earthdata Login token endpoint."""
    if not config.base_url or not config.username or not config.password:
        raise ConfigurationError(
            "Earthdata token requires base URL, username and password",
            value="earthdata",
        )

    endpoint = f"{config.base_url.rstrip('/')}/token"
    with _session_scope(session) as active:
        response = _get(
            active, endpoint, auth=(config.username, config.password), timeout=timeout
        )

    body = _json_body(response, endpoint)
    message = body.get("message")
    token = message.get("token") if isinstance(message, dict) else None
    token = token or body.get("access_token")
    if not token:
        raise AuthenticationError(f"No token in response from {endpoint}")
    return token


def _certificate_adapter(config: TokenConfig) -> ClientCertificateAdapter:
    try:
        return ClientCertificateAdapter(
            config.launchpad_certificate, config.launchpad_passphrase
        )
    except (OSError, ssl.SSLError) as exc:
        raise AuthenticationError(
            f"Unable to load Launchpad certificate {config.launchpad_certificate}",
            original_error=exc,
        ) from exc


def fetch_launchpad_token(
    config: TokenConfig, timeout: int = 30, session: Optional[requests.Session] = None
) -> str:
    """
    Obtain a token from Launchpad using client-certificate authentication.

    Without a session, a private one is opened with the certificate adapter
    mounted. A caller-supplied session is not modified and must already
    present the certificate.
    """
    if not config.launchpad_api or not config.launchpad_certificate:
        raise ConfigurationError(
            "Launchpad token requires launchpad API URL and certificate",
            value="launchpad",
        )

    endpoint = f"{config.launchpad_api.rstrip('/')}/gettoken"
    with _session_scope(session) as active:
        if session is None:
            active.mount("https://", _certificate_adapter(config))
        response = _get(active, endpoint, timeout=timeout)

    token = _json_body(response, endpoint).get("sm_token")
    if not token:
        raise AuthenticationError(f"No sm_token in response from {endpoint}")
    return token


TOKEN_FETCHERS: Dict[str, Callable[..., str]] = {
    "earthdata": fetch_earthdata_token,
    "launchpad": fetch_launchpad_token,
}


def get_auth_token(
    provider: str,
    config: TokenConfig,
    timeout: int = 30,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Obtain a bearer token from the given OAuth provider.

    Raises:
        ConfigurationError: If the provider kind is unknown or credentials are missing
        AuthenticationError: If the token endpoint fails
    """
    fetcher = TOKEN_FETCHERS.get(provider)
    if fetcher is None:
        raise ConfigurationError(
            f"Unsupported OAuth provider '{provider}'; "
            f"supported: {sorted(TOKEN_FETCHERS)}",
            value=provider,
        )

    logger.info("auth.token_requested", oauth_provider=provider)
    token = fetcher(config, timeout=timeout, session=session)
    logger.info("auth.token_fetched", oauth_provider=provider)
    return token


def _resolve_named(resolver: SecretResolver, secret_name: str, setting: str) -> str:
    if not secret_name:
        raise ConfigurationError(f"Setting '{setting}' is not configured", value=setting)
    return resolver.resolve(secret_name)


def build_token_config(settings: Settings, resolver: SecretResolver) -> TokenConfig:
    """
    Assemble token credentials from settings, resolving secrets once.

    Only the secrets the configured provider kind needs are resolved.
    """
    password = None
    passphrase = None
    if settings.oauth_provider == "earthdata":
        password = _resolve_named(
            resolver, settings.urs_password_secret_name, "urs_password_secret_name"
        )
    else:
        passphrase = _resolve_named(
            resolver,
            settings.launchpad_passphrase_secret_name,
            "launchpad_passphrase_secret_name",
        )

    return TokenConfig(
        base_url=settings.archive_api_uri,
        username=settings.urs_id,
        password=password,
        launchpad_passphrase=passphrase,
        launchpad_api=settings.launchpad_api,
        launchpad_certificate=settings.launchpad_certificate,
    )
