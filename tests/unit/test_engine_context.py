"""Tests for hotfix_release/engine/context.py."""

import pytest

from hotfix_release.engine.context import HotfixContext
from hotfix_release.models.domain import (
    CherryPickOutcome,
    CherryPickStatus,
    ConflictBranch,
    DraftPullRequest,
    PublishOutcome,
    PublishStatus,
    Release,
    ReleaseBranch,
    TriggerEvent,
)


class TestAccessors:
    """Accessors fail loudly when a stage runs out of order."""

    def test_pull_request(self, merged_event):
        assert HotfixContext(event=merged_event).pull_request.number == 42

    def test_pull_request_missing(self):
        context = HotfixContext(event=TriggerEvent(owner="octo", repo="app", pull_request=None))

        with pytest.raises(RuntimeError, match="no pull request"):
            context.pull_request

    def test_require_release_before_resolution(self, merged_event):
        with pytest.raises(RuntimeError, match="Version has not been resolved"):
            HotfixContext(event=merged_event).require_release()

    def test_require_release_branch_before_resolution(self, merged_event):
        with pytest.raises(RuntimeError, match="Release branch"):
            HotfixContext(event=merged_event).require_release_branch()

    def test_require_release(self, merged_event):
        release = Release(tag_name="1.2.3", target_commitish="main")
        context = HotfixContext(event=merged_event, release=release, version="1.2.4")

        assert context.require_release() == (release, "1.2.4")


class TestSummary:
    """Tests for the run summary."""

    def test_summary_before_resolution(self, merged_event):
        summary = HotfixContext(event=merged_event).summary()

        assert summary == {
            "owner": "octo",
            "repo": "app",
            "pull_request": 42,
            "version": None,
            "release_branch": None,
            "release_branch_state": None,
        }

    def test_summary_with_conflict(self, merged_event):
        context = HotfixContext(
            event=merged_event,
            version="1.2.4",
            release_branch=ReleaseBranch(name="release-1.2.4"),
            cherry_pick=CherryPickOutcome(
                status=CherryPickStatus.CONFLICT,
                commit_sha="abc123",
                conflict_branch=ConflictBranch(name="release-1.2.4-42-conflict", sha="abc123"),
            ),
            publish=PublishOutcome(
                status=PublishStatus.CREATED,
                pull_request=DraftPullRequest(title="Release 1.2.4", head="release-1.2.4", base="main", number=101),
            ),
        )

        summary = context.summary()

        assert summary["cherry_pick"] == "conflict"
        assert summary["conflict_branch"] == "release-1.2.4-42-conflict"
        assert summary["pull_request_status"] == "created"
        assert summary["release_pull_request"] == 101
