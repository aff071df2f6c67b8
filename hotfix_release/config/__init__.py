"""Configuration system for hotfix-release.

This package provides type-safe configuration management using Pydantic,
including settings for the hosting platform, repository and release policy.

Key Components:
    - HotfixSettings: Main configuration container with YAML loading support
    - GitProviderConfig: Hosting platform configuration
    - RepositoryConfig: Repository coordinates and mainline branch
    - ReleaseConfig: Branch naming, tag prefixes and publishing policy

Example:
    >>> from hotfix_release.config.settings import HotfixSettings
    >>> settings = HotfixSettings.from_yaml("hotfix.yaml")
    >>> settings.release.branch_separator
    '-'
"""
