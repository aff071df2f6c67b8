"""Tests for hotfix_release/rendering/engine.py."""

import pytest

from hotfix_release.exceptions import ConfigurationError
from hotfix_release.rendering.engine import (
    CONFLICT_COMMENT_TEMPLATE,
    PULL_REQUEST_BODY_TEMPLATE,
    MessageTemplateEngine,
)


@pytest.fixture
def engine():
    return MessageTemplateEngine()


class TestConflictComment:
    """Tests for the manual-resolution comment."""

    def test_names_branches_and_commit(self, engine):
        body = engine.render_conflict_comment(
            commit_sha="abc123",
            pr_number=42,
            release_branch="release-1.2.4",
            conflict_branch="release-1.2.4-42-conflict",
        )

        assert "`abc123`" in body
        assert "#42" in body
        assert "`release-1.2.4`" in body
        assert "`release-1.2.4-42-conflict`" in body

    def test_contains_resolution_recipe(self, engine):
        body = engine.render_conflict_comment(
            commit_sha="abc123",
            pr_number=42,
            release_branch="release/1.2.4",
            conflict_branch="release/1.2.4-42-conflict",
        )

        assert "git checkout release/1.2.4-42-conflict" in body
        assert "git merge origin/release/1.2.4" in body
        assert "git push origin release/1.2.4-42-conflict" in body
        assert body.index("git checkout") < body.index("git merge") < body.index("git push")

    def test_ends_with_single_newline(self, engine):
        body = engine.render_conflict_comment("abc123", 42, "release-1.2.4", "release-1.2.4-42-conflict")

        assert body.endswith("\n")
        assert not body.endswith("\n\n")


class TestPullRequestBody:
    """Tests for the release pull request description."""

    def test_clean_cherry_pick(self, engine):
        body = engine.render_pull_request_body(
            version="1.2.4",
            base_tag="v1.2.3",
            release_branch="release-1.2.4",
            pr_number=42,
            pr_title="Fix crash on empty input",
            commit_sha="abc123",
        )

        assert "Patch release `1.2.4`" in body
        assert "`v1.2.3`" in body
        assert "#42 (Fix crash on empty input)" in body
        assert "conflicted" not in body

    def test_without_title(self, engine):
        body = engine.render_pull_request_body(
            version="1.2.4",
            base_tag="1.2.3",
            release_branch="release-1.2.4",
            pr_number=42,
            pr_title="",
            commit_sha="abc123",
        )

        assert "Includes #42, cherry-picked" in body

    def test_conflict_warning(self, engine):
        body = engine.render_pull_request_body(
            version="1.2.4",
            base_tag="1.2.3",
            release_branch="release-1.2.4",
            pr_number=42,
            pr_title="Fix",
            commit_sha="abc123",
            conflict_branch="release-1.2.4-42-conflict",
        )

        assert "conflicted" in body
        assert "`release-1.2.4-42-conflict`" in body


class TestCustomTemplates:
    """Tests for template overrides."""

    def test_override_one_template(self, template_dir):
        (template_dir / CONFLICT_COMMENT_TEMPLATE).write_text("Conflict on {{ conflict_branch }}")
        engine = MessageTemplateEngine(template_dir)

        comment = engine.render_conflict_comment("abc123", 42, "release-1.2.4", "release-1.2.4-42-conflict")
        body = engine.render_pull_request_body("1.2.4", "1.2.3", "release-1.2.4", 42, "Fix", "abc123")

        assert comment == "Conflict on release-1.2.4-42-conflict\n"
        assert "Patch release `1.2.4`" in body

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConfigurationError, match="does not exist"):
            MessageTemplateEngine(tmp_path / "nope")

    def test_undefined_variable(self, template_dir):
        (template_dir / PULL_REQUEST_BODY_TEMPLATE).write_text("{{ changelog }}")
        engine = MessageTemplateEngine(template_dir)

        with pytest.raises(ConfigurationError, match="changelog"):
            engine.render_pull_request_body("1.2.4", "1.2.3", "release-1.2.4", 42, "Fix", "abc123")

    def test_sandbox_blocks_internals(self, template_dir):
        (template_dir / CONFLICT_COMMENT_TEMPLATE).write_text("{{ commit_sha.__class__ }}")
        engine = MessageTemplateEngine(template_dir)

        with pytest.raises(ConfigurationError):
            engine.render_conflict_comment("abc123", 42, "release-1.2.4", "release-1.2.4-42-conflict")

    def test_syntax_error(self, template_dir):
        (template_dir / CONFLICT_COMMENT_TEMPLATE).write_text("{% if %}")
        engine = MessageTemplateEngine(template_dir)

        with pytest.raises(ConfigurationError, match="Cannot render template"):
            engine.render_conflict_comment("abc123", 42, "release-1.2.4", "release-1.2.4-42-conflict")
