"""
Bot configuration.

Values come from keyword arguments, environment variables (``from_env``)
or the command line; all three end up in a validated BotConfig.
"""

import os
from dataclasses import dataclass
from typing import Any

import httpx

from lgtmbot.classifier import DEFAULT_KEYWORD
from lgtmbot.exceptions import ConfigurationError
from lgtmbot.merge import RemoveSourceBranchPolicy
from lgtmbot.quorum import QUORUM_THRESHOLD

ENV_PREFIX = "LGTMBOT_"


@dataclass
class BotConfig:
    """Validated bot settings."""

    private_token: str
    gitlab_url: str
    host: str = "0.0.0.0"
    port: int = 8989
    hook_path: str = "/gitlab/hook"
    keyword: str = DEFAULT_KEYWORD
    quorum_threshold: int = QUORUM_THRESHOLD
    api_version: str = "v3"
    remove_source_branch: RemoveSourceBranchPolicy = RemoveSourceBranchPolicy.ALWAYS
    dedupe_merges: bool = False
    require_distinct_approvers: bool = False
    max_targets: int | None = None
    shards: int = 1
    webhook_secret: str | None = None
    merge_retries: int = 0
    timeout: float = 30.0
    merge_workers: int = 4

    def __post_init__(self) -> None:
        if not self.private_token:
            raise ConfigurationError("private token is required")
        if not self.gitlab_url:
            raise ConfigurationError("gitlab url is required")

        try:
            url = httpx.URL(self.gitlab_url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"invalid gitlab url {self.gitlab_url!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(
                f"invalid gitlab url {self.gitlab_url!r}: expected e.g. https://your.gitlab.com"
            )

        if not self.hook_path.startswith("/"):
            raise ConfigurationError("hook path must start with '/'")
        if not self.keyword:
            raise ConfigurationError("approval keyword must not be empty")

        for name in ("quorum_threshold", "shards", "merge_workers"):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be at least 1")
        if self.merge_retries < 0:
            raise ConfigurationError("merge_retries must not be negative")
        if self.max_targets is not None and self.max_targets < 1:
            raise ConfigurationError("max_targets must be at least 1")
        if self.max_targets is not None and self.max_targets < self.shards:
            raise ConfigurationError("max_targets must be at least the number of shards")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"invalid port {self.port}")

        try:
            self.remove_source_branch = RemoveSourceBranchPolicy(self.remove_source_branch)
        except ValueError as e:
            choices = ", ".join(p.value for p in RemoveSourceBranchPolicy)
            raise ConfigurationError(
                f"remove_source_branch must be one of: {choices}"
            ) from e

    @classmethod
    def from_env(cls, **overrides: Any) -> "BotConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            LGTMBOT_PRIVATE_TOKEN: GitLab private token (required)
            LGTMBOT_GITLAB_URL: e.g. https://your.gitlab.com (required)
            LGTMBOT_HOST, LGTMBOT_PORT, LGTMBOT_HOOK_PATH
            LGTMBOT_KEYWORD, LGTMBOT_QUORUM, LGTMBOT_API_VERSION
            LGTMBOT_REMOVE_SOURCE_BRANCH: always, event or never
            LGTMBOT_DEDUPE_MERGES, LGTMBOT_DISTINCT_APPROVERS: true/false
            LGTMBOT_MAX_TARGETS, LGTMBOT_SHARDS, LGTMBOT_MERGE_RETRIES
            LGTMBOT_WEBHOOK_SECRET, LGTMBOT_TIMEOUT

        Args:
            **overrides: Values taking precedence over the environment

        Raises:
            ConfigurationError: If required variables are missing or malformed
        """
        values: dict[str, Any] = {
            "private_token": _env("PRIVATE_TOKEN"),
            "gitlab_url": _env("GITLAB_URL"),
            "host": _env("HOST"),
            "port": _env_int("PORT"),
            "hook_path": _env("HOOK_PATH"),
            "keyword": _env("KEYWORD"),
            "quorum_threshold": _env_int("QUORUM"),
            "api_version": _env("API_VERSION"),
            "remove_source_branch": _env("REMOVE_SOURCE_BRANCH"),
            "dedupe_merges": _env_bool("DEDUPE_MERGES"),
            "require_distinct_approvers": _env_bool("DISTINCT_APPROVERS"),
            "max_targets": _env_int("MAX_TARGETS"),
            "shards": _env_int("SHARDS"),
            "webhook_secret": _env("WEBHOOK_SECRET"),
            "merge_retries": _env_int("MERGE_RETRIES"),
            "timeout": _env_float("TIMEOUT"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        values = {k: v for k, v in values.items() if v is not None}

        values.setdefault("private_token", "")
        values.setdefault("gitlab_url", "")
        return cls(**values)


def _env(name: str) -> str | None:
    value = os.environ.get(ENV_PREFIX + name)
    return value if value else None


def _env_int(name: str) -> int | None:
    value = _env(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}") from e


def _env_float(name: str) -> float | None:
    value = _env(name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {value!r}") from e


def _env_bool(name: str) -> bool | None:
    value = _env(name)
    if value is None:
        return None
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{ENV_PREFIX}{name} must be true or false, got {value!r}")
