"""Execution context for the hotfix pipeline.

This module provides the HotfixContext dataclass that carries the trigger
event and every stage's output through the pipeline. The finished context
is the outcome of a run.
"""

from dataclasses import dataclass

from hotfix_release.models.domain import (
    CherryPickOutcome,
    PublishOutcome,
    PullRequestInfo,
    Release,
    ReleaseBranch,
    TriggerEvent,
)


@dataclass
class HotfixContext:
    """Context passed through the pipeline stages.

    Each stage fills in its own field; later stages read the fields of
    earlier ones. Accessors raise RuntimeError when a stage runs before
    the stage it depends on.

    Attributes:
        event: The triggering event (required)
        release: Latest published release (version resolver)
        version: Next patch version (version resolver)
        release_branch: Reconciled release branch (branch reconciler)
        cherry_pick: Cherry-pick outcome (cherry-pick executor)
        publish: Publishing outcome (pull-request publisher)
        dry_run: If True, stop after version resolution
    """

    event: TriggerEvent
    release: Release | None = None
    version: str | None = None
    release_branch: ReleaseBranch | None = None
    cherry_pick: CherryPickOutcome | None = None
    publish: PublishOutcome | None = None
    dry_run: bool = False

    @property
    def pull_request(self) -> PullRequestInfo:
        if self.event.pull_request is None:
            raise RuntimeError("Trigger event has no pull request")
        return self.event.pull_request

    @property
    def merge_commit_sha(self) -> str:
        sha = self.pull_request.merge_commit_sha
        if not sha:
            raise RuntimeError("Pull request has no merge commit")
        return sha

    def require_release(self) -> tuple[Release, str]:
        if self.release is None or self.version is None:
            raise RuntimeError("Version has not been resolved")
        return self.release, self.version

    def require_release_branch(self) -> ReleaseBranch:
        if self.release_branch is None:
            raise RuntimeError("Release branch has not been reconciled")
        return self.release_branch

    def summary(self) -> dict[str, object]:
        """Flat description of the run for logs and CLI output."""
        data: dict[str, object] = {
            "owner": self.event.owner,
            "repo": self.event.repo,
            "pull_request": self.event.pull_request.number if self.event.pull_request else None,
            "version": self.version,
            "release_branch": self.release_branch.name if self.release_branch else None,
            "release_branch_state": self.release_branch.state.value if self.release_branch else None,
        }
        if self.cherry_pick is not None:
            data["cherry_pick"] = self.cherry_pick.status.value
            if self.cherry_pick.conflict_branch is not None:
                data["conflict_branch"] = self.cherry_pick.conflict_branch.name
        if self.publish is not None:
            data["pull_request_status"] = self.publish.status.value
            data["release_pull_request"] = self.publish.pull_request.number
        return data
