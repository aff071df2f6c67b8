"""Factory for creating hosting-platform providers."""

import structlog

from hotfix_release.config.settings import HotfixSettings
from hotfix_release.exceptions import ConfigurationError
from hotfix_release.providers.base import GitProvider
from hotfix_release.providers.github_rest import GitHubRestProvider

log = structlog.get_logger(__name__)


def create_git_provider(settings: HotfixSettings, owner: str, repo: str) -> GitProvider:
    """Create the Git provider for a repository based on configuration.

    Args:
        settings: Settings containing provider configuration
        owner: Repository owner taken from the triggering event
        repo: Repository name taken from the triggering event

    Returns:
        GitProvider instance bound to owner/repo

    Raises:
        ConfigurationError: If no API token is configured or the provider
            type is not supported

    Example:
        >>> provider = create_git_provider(settings, "octo", "app")
        >>> await provider.connect()
    """
    provider_type = settings.git_provider.provider_type
    token = settings.git_provider.api_token

    if token is None or not token.get_secret_value().strip():
        raise ConfigurationError("No API token configured (set GITHUB_TOKEN or git_provider.api_token)")

    if provider_type == "github":
        log.info("creating_github_provider", base_url=str(settings.git_provider.base_url))
        return GitHubRestProvider(
            token=token.get_secret_value(),
            owner=owner,
            repo=repo,
            base_url=str(settings.git_provider.base_url).rstrip("/"),
        )

    raise ConfigurationError(f"Unsupported Git provider type: {provider_type}. Supported types: github")
