"""hotfix-release: automated patch releases from merged pull requests."""

__version__ = "0.1.0"
