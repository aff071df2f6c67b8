"""Provider implementations for Git hosting platforms.

This package provides the hosting-platform collaborator used by the hotfix
pipeline and its GitHub implementation.

Key Components:
    - GitProvider: Abstract base for hosting-platform providers
    - GitHubRestProvider: GitHub implementation using PyGithub
    - create_git_provider: Factory building a provider from settings

Example:
    >>> from hotfix_release.providers.factory import create_git_provider
    >>> git = create_git_provider(settings, owner="octo", repo="app")
    >>> await git.connect()
    >>> release = await git.get_latest_release()
"""

from hotfix_release.providers.base import GitProvider

__all__ = [
    "GitProvider",
]
