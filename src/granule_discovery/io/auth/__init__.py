"""Token acquisition and secret resolution for catalog access."""

from granule_discovery.io.auth.secrets import (
    EnvironmentSecretSource,
    FileSecretSource,
    SecretResolver,
    SecretSource,
    default_secret_resolver,
    env_var_for_secret,
)
from granule_discovery.io.auth.token import (
    TokenConfig,
    build_token_config,
    fetch_earthdata_token,
    fetch_launchpad_token,
    get_auth_token,
)

__all__ = [
    "EnvironmentSecretSource",
    "FileSecretSource",
    "SecretResolver",
    "SecretSource",
    "TokenConfig",
    "build_token_config",
    "default_secret_resolver",
    "env_var_for_secret",
    "fetch_earthdata_token",
    "fetch_launchpad_token",
    "get_auth_token",
]
