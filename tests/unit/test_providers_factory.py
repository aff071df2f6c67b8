"""Tests for hotfix_release/providers/factory.py."""

import pytest

from hotfix_release.config.settings import HotfixSettings
from hotfix_release.exceptions import ConfigurationError
from hotfix_release.providers.factory import create_git_provider
from hotfix_release.providers.github_rest import GitHubRestProvider


class TestCreateGitProvider:
    """Tests for provider construction from settings."""

    def test_github_provider(self, settings):
        provider = create_git_provider(settings, "octo", "app")

        assert isinstance(provider, GitHubRestProvider)
        assert provider.owner == "octo"
        assert provider.repo == "app"
        assert provider.token == "test-token"
        assert provider.base_url == "https://api.github.com"

    def test_enterprise_base_url(self):
        settings = HotfixSettings(
            git_provider={"api_token": "tok", "base_url": "https://github.corp.example/api/v3"}
        )

        provider = create_git_provider(settings, "corp", "svc")

        assert provider.base_url == "https://github.corp.example/api/v3"

    def test_missing_token(self):
        with pytest.raises(ConfigurationError, match="No API token"):
            create_git_provider(HotfixSettings(), "octo", "app")

    def test_blank_token(self):
        settings = HotfixSettings(git_provider={"api_token": "   "})

        with pytest.raises(ConfigurationError, match="No API token"):
            create_git_provider(settings, "octo", "app")

    def test_unsupported_provider_type(self, settings):
        settings.git_provider.provider_type = "gitea"

        with pytest.raises(ConfigurationError, match="Unsupported Git provider type"):
            create_git_provider(settings, "octo", "app")
