"""Runtime configuration — env-driven.

Centralized config using pydantic-settings for environment variable
support.  Reads from a .env file and RELEASENOTARY_* environment variables.
The positional command-line values (ledger URLs, tokens, release URL) are
not settings; they are passed per invocation.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class NotaryConfig(BaseSettings):
    """Tool configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export RELEASENOTARY_LOG_LEVEL=DEBUG
        export RELEASENOTARY_HTTP_TIMEOUT_SECONDS=60
        export RELEASENOTARY_WORKSPACE_PARENT=/var/tmp

    Or via .env file::

        RELEASENOTARY_IDENTITY_SUFFIX=@github
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RELEASENOTARY_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "WARNING"

    # HTTP: one timeout for every request
    http_timeout_seconds: float = 30.0
    release_accept_header: str = "application/vnd.github.v3+json"

    # Signer identities are "<login><suffix>"
    identity_suffix: str = "@github"

    # Download workspace
    workspace_prefix: str = "notarize-release-assets-"
    workspace_parent: Path | None = None  # system temp dir when unset
    download_chunk_size: int = 1024 * 1024


# Module-level singleton; import as `from releasenotary.config import config`
config = NotaryConfig()
