"""Sandboxed Jinja2 rendering of pull request comments and descriptions.

The conflict comment and the release pull request body are Markdown
templates. They are rendered in a SandboxedEnvironment with StrictUndefined
so a custom template (``release.template_dir``) can neither execute
arbitrary code nor silently drop a missing value.

Example:
    >>> engine = MessageTemplateEngine()
    >>> body = engine.render_conflict_comment(
    ...     commit_sha="abc123",
    ...     pr_number=42,
    ...     release_branch="release-1.2.4",
    ...     conflict_branch="release-1.2.4-42-conflict",
    ... )
"""

from pathlib import Path
from typing import Any

from jinja2 import ChoiceLoader, FileSystemLoader, StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from hotfix_release.exceptions import ConfigurationError

BUILTIN_TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

CONFLICT_COMMENT_TEMPLATE = "conflict_comment.md.j2"
PULL_REQUEST_BODY_TEMPLATE = "release_pull_request.md.j2"


class MessageTemplateEngine:
    """Render the workflow's Markdown messages.

    Templates in ``template_dir`` take precedence over the built-in ones,
    so a repository can override a single template and keep the other.

    Attributes:
        template_dirs: Directories searched for templates, in order.
        env: The SandboxedEnvironment instance.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        """Initialize the engine.

        Args:
            template_dir: Optional directory with overriding templates.

        Raises:
            ConfigurationError: If template_dir doesn't exist or isn't a directory.
        """
        self.template_dirs = [BUILTIN_TEMPLATE_DIR.resolve()]

        if template_dir is not None:
            custom = template_dir.resolve()
            if not custom.is_dir():
                raise ConfigurationError(f"Template directory does not exist: {custom}")
            self.template_dirs.insert(0, custom)

        self.env = SandboxedEnvironment(
            loader=ChoiceLoader([FileSystemLoader(str(d)) for d in self.template_dirs]),
            undefined=StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template with the given context.

        Raises:
            ConfigurationError: If the template is missing, malformed or
                references an undefined variable.
        """
        try:
            template = self.env.get_template(template_name)
            return template.render(**context).strip() + "\n"
        except TemplateError as e:
            raise ConfigurationError(f"Cannot render template {template_name}: {e}") from e

    def render_conflict_comment(
        self,
        commit_sha: str,
        pr_number: int,
        release_branch: str,
        conflict_branch: str,
    ) -> str:
        """Render the manual-resolution comment posted on a conflicting pull request."""
        return self.render(
            CONFLICT_COMMENT_TEMPLATE,
            {
                "commit_sha": commit_sha,
                "pr_number": pr_number,
                "release_branch": release_branch,
                "conflict_branch": conflict_branch,
            },
        )

    def render_pull_request_body(
        self,
        version: str,
        base_tag: str,
        release_branch: str,
        pr_number: int,
        pr_title: str,
        commit_sha: str,
        conflict_branch: str | None = None,
    ) -> str:
        """Render the description of the release pull request."""
        return self.render(
            PULL_REQUEST_BODY_TEMPLATE,
            {
                "version": version,
                "base_tag": base_tag,
                "release_branch": release_branch,
                "pr_number": pr_number,
                "pr_title": pr_title,
                "commit_sha": commit_sha,
                "conflict_branch": conflict_branch,
            },
        )
