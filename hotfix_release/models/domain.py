"""
Domain models for the hotfix release workflow.

This module contains the data classes and enums describing the remote
resources the workflow reads and creates (releases, refs, pull requests,
comments) and the outcome of each pipeline stage. They are the normalized
internal representation, converted from provider-specific objects (PyGithub
``GitRelease``, ``GitRef``, ``PullRequest``) at the provider boundary.

All entities are owned by the hosting platform. The workflow only creates
and reads them and keeps no local state between runs.

Example:
    Building a trigger event from a webhook payload::

        event = TriggerEvent.from_payload(payload)
        if event.pull_request and event.pull_request.merged:
            ...
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from hotfix_release.exceptions import UnsupportedEventError


@dataclass(frozen=True)
class PullRequestInfo:
    """The pull request section of a triggering event."""

    number: int
    """Repository-scoped pull request number (e.g., #42)."""

    merged: bool
    """Whether the pull request was merged (not merely closed)."""

    merge_commit_sha: str | None
    """SHA of the commit produced on mainline by the merge.

    Present for merged pull requests. May be None for closed, unmerged ones.
    """

    title: str = ""
    """Pull request title, used in the release pull request body."""

    url: str = ""
    """Web URL of the pull request."""


@dataclass(frozen=True)
class TriggerEvent:
    """Immutable input of a single workflow run.

    Mirrors the subset of a ``pull_request`` webhook payload the workflow
    needs. ``pull_request`` is None when the payload belongs to another
    event type; the context extractor rejects such events.
    """

    owner: str
    repo: str
    pull_request: PullRequestInfo | None

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        owner: str | None = None,
        repo: str | None = None,
    ) -> "TriggerEvent":
        """Build a trigger event from a raw webhook payload.

        Repository coordinates are read from the payload's ``repository``
        section; ``owner`` and ``repo`` are used when the payload lacks them.

        Args:
            payload: Decoded JSON event payload
            owner: Fallback repository owner
            repo: Fallback repository name

        Returns:
            TriggerEvent for the payload

        Raises:
            UnsupportedEventError: If repository coordinates are missing or
                the pull_request section is malformed
        """
        if not isinstance(payload, dict):
            raise UnsupportedEventError("Event payload must be a JSON object.")

        repository = payload.get("repository") or {}
        payload_owner = (repository.get("owner") or {}).get("login")
        payload_repo = repository.get("name")

        resolved_owner = payload_owner or owner
        resolved_repo = payload_repo or repo
        if not resolved_owner or not resolved_repo:
            raise UnsupportedEventError("Event payload does not identify a repository.")

        pr_data = payload.get("pull_request")
        if pr_data is None:
            return cls(owner=resolved_owner, repo=resolved_repo, pull_request=None)

        if not isinstance(pr_data, dict) or not isinstance(pr_data.get("number"), int):
            raise UnsupportedEventError("Event pull_request section has no valid number.")

        merged = pr_data.get("merged", False)
        if not isinstance(merged, bool):
            raise UnsupportedEventError(f"Event pull_request.merged must be a boolean, got {merged!r}.")

        pull_request = PullRequestInfo(
            number=pr_data["number"],
            merged=merged,
            merge_commit_sha=pr_data.get("merge_commit_sha") or None,
            title=pr_data.get("title") or "",
            url=pr_data.get("html_url") or "",
        )
        return cls(owner=resolved_owner, repo=resolved_repo, pull_request=pull_request)


@dataclass(frozen=True)
class Release:
    """The latest published release of the repository."""

    tag_name: str
    """Tag the release was published from (e.g., "1.2.3" or "v1.2.3")."""

    target_commitish: str
    """Branch name or commit SHA the release tag was created against.

    Loosely defined by the platform: usually the branch that was checked
    out when the release was drafted, not the tagged commit itself.
    """


class RefLookupStatus(str, Enum):
    """Outcome of a ref lookup."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class RefLookup:
    """Explicit result of looking up a git ref.

    Separates "the ref does not exist" from every other failure so callers
    branch only on a genuine absence.
    """

    ref: str
    status: RefLookupStatus
    sha: str | None = None
    error: str | None = None
    status_code: int | None = None

    @classmethod
    def found(cls, ref: str, sha: str) -> "RefLookup":
        return cls(ref=ref, status=RefLookupStatus.FOUND, sha=sha)

    @classmethod
    def not_found(cls, ref: str) -> "RefLookup":
        return cls(ref=ref, status=RefLookupStatus.NOT_FOUND)

    @classmethod
    def failed(cls, ref: str, error: str, status_code: int | None = None) -> "RefLookup":
        return cls(ref=ref, status=RefLookupStatus.ERROR, error=error, status_code=status_code)

    @property
    def exists(self) -> bool:
        return self.status == RefLookupStatus.FOUND

    @property
    def missing(self) -> bool:
        return self.status == RefLookupStatus.NOT_FOUND


class BranchState(str, Enum):
    """Release branch reconciliation state.

    Every run starts in UNKNOWN and ends in EXISTS or CREATED.
    """

    UNKNOWN = "unknown"
    EXISTS = "exists"
    CREATED = "created"


@dataclass
class ReleaseBranch:
    """The long-lived branch carrying hotfix commits for a patch release."""

    name: str
    """Branch name without "refs/heads/", derived from the release version."""

    base_sha: str | None = None
    """Commit the branch was created from (CREATED) or its tip at lookup (EXISTS)."""

    state: BranchState = BranchState.UNKNOWN

    @property
    def ref(self) -> str:
        return f"heads/{self.name}"


@dataclass(frozen=True)
class ConflictBranch:
    """Side branch created at the raw merge commit when a cherry-pick fails."""

    name: str
    sha: str
    reused: bool = False
    """True when the branch already existed from an earlier run for the same PR."""


class CherryPickStatus(str, Enum):
    """Outcome of applying the merge commit onto the release branch."""

    APPLIED = "applied"
    ALREADY_APPLIED = "already_applied"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class CherryPickOutcome:
    """Result of the cherry-pick executor stage."""

    status: CherryPickStatus
    commit_sha: str
    head_sha: str | None = None
    """Release branch tip after the stage (unchanged on conflict)."""

    conflict_branch: ConflictBranch | None = None
    error: str | None = None

    @property
    def conflicted(self) -> bool:
        return self.status == CherryPickStatus.CONFLICT


@dataclass(frozen=True)
class Comment:
    """A comment posted on an issue or pull request."""

    id: int
    body: str
    url: str = ""


@dataclass(frozen=True)
class DraftPullRequest:
    """The release pull request from the release branch back to mainline."""

    title: str
    head: str
    base: str
    body: str = ""
    draft: bool = True
    number: int | None = None
    """Assigned by the platform once the pull request exists."""

    url: str = ""


class PublishStatus(str, Enum):
    """Outcome of the pull-request publisher stage."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class PublishOutcome:
    """Result of the pull-request publisher stage."""

    status: PublishStatus
    pull_request: DraftPullRequest
    reason: str | None = None
