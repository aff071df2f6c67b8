"""Template rendering for pull request comments and descriptions.

Key Exports:
    MessageTemplateEngine: Sandboxed Jinja2 renderer for the conflict
        comment and the release pull request body.
"""

from .engine import MessageTemplateEngine

__all__ = ["MessageTemplateEngine"]
