"""
Configuration system using Pydantic for type-safe settings management.

This module provides configuration classes for the hosting platform, the
repository and the release policy (branch naming, tag prefixes, base-ref
resolution and publishing behavior).
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hotfix_release.exceptions import ConfigurationError


class GitProviderConfig(BaseModel):
    """Hosting platform configuration."""

    provider_type: Literal["github"] = Field(default="github", description="Type of Git provider")
    base_url: HttpUrl = Field(
        default="https://api.github.com",
        validate_default=True,
        description="API base URL (GitHub Enterprise: https://host/api/v3)",
    )
    api_token: SecretStr | None = Field(default=None, description="API token for authentication")


class RepositoryConfig(BaseModel):
    """Repository configuration.

    ``owner`` and ``name`` are fallbacks for event payloads without a
    ``repository`` section.
    """

    owner: str | None = Field(default=None, description="Repository owner/organization")
    name: str | None = Field(default=None, description="Repository name")
    mainline_branch: str = Field(default="main", description="Branch release pull requests target")


class ReleaseConfig(BaseModel):
    """Release policy configuration."""

    branch_prefix: str = Field(default="release", min_length=1, description="Release branch name prefix")
    branch_separator: Literal["-", "/"] = Field(
        default="-", description="Separator between prefix and version in branch names"
    )
    tag_prefixes: list[str] = Field(
        default_factory=lambda: ["v"],
        description="Prefixes stripped from release tags before version parsing",
    )
    base_ref_strategy: Literal["tag", "target_commitish"] = Field(
        default="tag",
        description="Where a new release branch starts: the tagged commit or the release target",
    )
    conflict_suffix: str = Field(default="conflict", min_length=1, description="Conflict branch name suffix")
    title_template: str = Field(default="Release {version}", description="Release pull request title")
    draft: bool = Field(default=True, description="Open the release pull request as a draft")
    publish_on_conflict: bool = Field(
        default=True, description="Still open the release pull request when the cherry-pick conflicts"
    )
    existing_pull_request_ok: bool = Field(
        default=True, description="Treat an already open release pull request as success"
    )
    template_dir: str | None = Field(
        default=None,
        description="Directory overriding the built-in comment and pull request body templates",
    )

    @field_validator("title_template")
    @classmethod
    def validate_title_template(cls, value: str) -> str:
        """Ensure the title template only references {version}."""
        try:
            value.format(version="0.0.0")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"title_template may only use the {{version}} placeholder: {e}") from e
        return value


class HotfixSettings(BaseSettings):
    """Main hotfix-release settings.

    This class combines all configuration sections and provides methods
    for loading from YAML files with environment variable interpolation.
    Without a file, every field can be set through ``HOTFIX_*`` variables
    (e.g. ``HOTFIX_RELEASE__BRANCH_SEPARATOR=/``).
    """

    model_config = SettingsConfigDict(
        env_prefix="HOTFIX_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    git_provider: GitProviderConfig = Field(default_factory=GitProviderConfig)
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    release: ReleaseConfig = Field(default_factory=ReleaseConfig)
    log_level: str = Field(default="INFO", description="Logging level")

    @classmethod
    def from_yaml(cls, config_path: str) -> HotfixSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} syntax for environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            HotfixSettings instance

        Raises:
            ConfigurationError: If config file is invalid or missing required fields
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file) as f:
                yaml_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except TypeError as e:
            raise ConfigurationError(f"Missing or invalid configuration fields: {e}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            stripped = line.lstrip()
            if stripped.startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        lines = content.split("\n")
        return "\n".join(process_line(line) for line in lines)
