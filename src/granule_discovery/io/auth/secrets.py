"""
Secret resolution from an ordered list of sources.

Settings hold secret *names* (e.g. `urs_password_secret_name`), never values.
A SecretResolver asks each source in turn for the value; the first source that
has it wins and only when every source comes up empty does resolution fail.
A source that errors (unreadable or undecodable file, ...) counts as empty and
the next one is tried.
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from granule_discovery.config.settings import Settings
from granule_discovery.exceptions import SecretNotFoundError

logger = logging.getLogger(__name__)

ENV_SECRET_PREFIX = "GD_SECRET_"


@runtime_checkable
class SecretSource(Protocol):
    """A place secret values can be read from."""

    name: str

    def get(self, secret_name: str) -> Optional[str]:
        """Return the secret value, or None if this source does not have it."""
        ...


def env_var_for_secret(secret_name: str) -> str:
    """Map a secret name to its environment variable (`GD_SECRET_<NAME>`)."""
    return ENV_SECRET_PREFIX + re.sub(r"[^A-Za-z0-9]", "_", secret_name).upper()


class EnvironmentSecretSource:
    """Read secrets from `GD_SECRET_<NAME>` environment variables."""

    name = "environment"

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def get(self, secret_name: str) -> Optional[str]:
        return self.environ.get(env_var_for_secret(secret_name)) or None


class FileSecretSource:
    """Read secrets from files named after the secret inside a directory."""

    name = "file"

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def get(self, secret_name: str) -> Optional[str]:
        secret_path = self.directory / secret_name
        if not secret_path.is_file():
            return None
        value = secret_path.read_text(encoding="utf-8").strip()
        return value or None


class SecretResolver:
    """Try secret sources in order until one yields a value."""

    def __init__(self, sources: Sequence[SecretSource]):
        self.sources: List[SecretSource] = list(sources)

    def resolve(self, secret_name: str) -> str:
        """
        Resolve a secret value.

        Raises:
            SecretNotFoundError: If no source produced a value
        """
        failures = []
        for source in self.sources:
            try:
                value = source.get(secret_name)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning(
                    "Secret source failed, trying next",
                    extra={"source": source.name, "secret_name": secret_name},
                )
                failures.append(f"{source.name}: {exc}")
                continue
            if value is not None:
                logger.debug(
                    "Secret resolved",
                    extra={"source": source.name, "secret_name": secret_name},
                )
                return value
            failures.append(f"{source.name}: not found")

        raise SecretNotFoundError(
            f"Secret '{secret_name}' could not be resolved ({'; '.join(failures)})",
            value=secret_name,
        )


def default_secret_resolver(settings: Settings) -> SecretResolver:
    """Environment variables first, then `settings.secrets_dir` when set."""
    sources: List[SecretSource] = [EnvironmentSecretSource()]
    if settings.secrets_dir:
        sources.append(FileSecretSource(Path(settings.secrets_dir)))
    return SecretResolver(sources)
