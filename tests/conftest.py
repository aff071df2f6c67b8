"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from hotfix_release.config.settings import HotfixSettings
from hotfix_release.exceptions import (
    CherryPickConflictError,
    GitOperationError,
    PullRequestExistsError,
    RefAlreadyExistsError,
    ReleaseNotFoundError,
)
from hotfix_release.models.domain import (
    Comment,
    DraftPullRequest,
    PullRequestInfo,
    RefLookup,
    Release,
    TriggerEvent,
)
from hotfix_release.providers.base import GitProvider

TAG_SHA = "1" * 40
MAIN_SHA = "2" * 40
MERGE_SHA = "abc123"


class FakeGitProvider(GitProvider):
    """In-memory hosting platform.

    Refs are stored as ``{"heads/main": sha, "tags/1.2.3": sha}``. Every
    mutating call is recorded in ``calls`` so tests can assert on what was
    (and was not) issued.
    """

    def __init__(self, release: Release | None = None, refs: dict[str, str] | None = None) -> None:
        self.release = release
        self.refs: dict[str, str] = dict(refs or {})
        self.lookup_errors: dict[str, RefLookup] = {}
        self.cherry_pick_error: GitOperationError | None = None
        self.already_applied: set[tuple[str, str]] = set()
        self.comment_error: GitOperationError | None = None
        self.create_pr_error: Exception | None = None
        self.comments: list[tuple[int, str]] = []
        self.pull_requests: list[DraftPullRequest] = []
        self.calls: list[tuple] = []
        self.connected = False
        self._commit_counter = 0

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def get_latest_release(self) -> Release:
        self.calls.append(("get_latest_release",))
        if self.release is None:
            raise ReleaseNotFoundError("No published release found")
        return self.release

    async def get_tag_commit_sha(self, tag_name: str) -> str:
        self.calls.append(("get_tag_commit_sha", tag_name))
        sha = self.refs.get(f"tags/{tag_name}")
        if sha is None:
            raise GitOperationError(f"Tag {tag_name} not found", status_code=404)
        return sha

    async def get_ref(self, ref: str) -> RefLookup:
        self.calls.append(("get_ref", ref))
        if ref in self.lookup_errors:
            return self.lookup_errors[ref]
        if ref in self.refs:
            return RefLookup.found(ref, self.refs[ref])
        return RefLookup.not_found(ref)

    async def create_ref(self, ref: str, sha: str) -> None:
        self.calls.append(("create_ref", ref, sha))
        key = ref.removeprefix("refs/")
        if key in self.refs:
            raise RefAlreadyExistsError(f"Reference {ref} already exists", status_code=422)
        self.refs[key] = sha

    async def cherry_pick(self, branch: str, commit_sha: str) -> str:
        self.calls.append(("cherry_pick", branch, commit_sha))
        if self.cherry_pick_error is not None:
            raise self.cherry_pick_error
        if (branch, commit_sha) in self.already_applied:
            return self.refs[f"heads/{branch}"]
        self._commit_counter += 1
        new_sha = f"{self._commit_counter:040x}"
        self.refs[f"heads/{branch}"] = new_sha
        self.already_applied.add((branch, commit_sha))
        return new_sha

    async def add_comment(self, issue_number: int, body: str) -> Comment:
        self.calls.append(("add_comment", issue_number))
        if self.comment_error is not None:
            raise self.comment_error
        self.comments.append((issue_number, body))
        return Comment(id=len(self.comments), body=body)

    async def find_pull_request(self, head: str, base: str) -> DraftPullRequest | None:
        self.calls.append(("find_pull_request", head, base))
        for pr in self.pull_requests:
            if pr.head == head and pr.base == base:
                return pr
        return None

    async def create_pull_request(
        self,
        title: str,
        body: str,
        head: str,
        base: str,
        draft: bool = True,
    ) -> DraftPullRequest:
        self.calls.append(("create_pull_request", head, base))
        if self.create_pr_error is not None:
            raise self.create_pr_error
        if any(pr.head == head and pr.base == base for pr in self.pull_requests):
            raise PullRequestExistsError(f"A pull request from {head} to {base} already exists", status_code=422)
        pr = DraftPullRequest(
            title=title,
            head=head,
            base=base,
            body=body,
            draft=draft,
            number=100 + len(self.pull_requests),
            url=f"https://github.com/octo/app/pull/{100 + len(self.pull_requests)}",
        )
        self.pull_requests.append(pr)
        return pr

    def mutations(self) -> list[tuple]:
        """Calls that change remote state."""
        mutating = {"create_ref", "cherry_pick", "add_comment", "create_pull_request"}
        return [call for call in self.calls if call[0] in mutating]


def conflict(commit_sha: str = MERGE_SHA, branch: str = "release-1.2.4") -> CherryPickConflictError:
    return CherryPickConflictError(
        f"Commit {commit_sha} does not apply cleanly on {branch}",
        commit_sha=commit_sha,
        branch=branch,
        status_code=409,
    )


@pytest.fixture
def fake_git() -> FakeGitProvider:
    """Platform with release 1.2.3 tagged on TAG_SHA and a main branch."""
    return FakeGitProvider(
        release=Release(tag_name="1.2.3", target_commitish="main"),
        refs={"tags/1.2.3": TAG_SHA, "heads/main": MAIN_SHA},
    )


@pytest.fixture
def settings() -> HotfixSettings:
    """Default settings with a token."""
    return HotfixSettings(git_provider={"api_token": "test-token"})


@pytest.fixture
def merged_event() -> TriggerEvent:
    """Merged PR #42 with merge commit abc123."""
    return TriggerEvent(
        owner="octo",
        repo="app",
        pull_request=PullRequestInfo(
            number=42,
            merged=True,
            merge_commit_sha=MERGE_SHA,
            title="Fix crash on empty input",
            url="https://github.com/octo/app/pull/42",
        ),
    )


@pytest.fixture
def event_payload() -> dict:
    """Raw pull_request.closed webhook payload for merged PR #42."""
    return {
        "action": "closed",
        "pull_request": {
            "number": 42,
            "merged": True,
            "merge_commit_sha": MERGE_SHA,
            "title": "Fix crash on empty input",
            "html_url": "https://github.com/octo/app/pull/42",
        },
        "repository": {"name": "app", "owner": {"login": "octo"}},
    }


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Directory for overriding templates."""
    directory = tmp_path / "templates"
    directory.mkdir()
    return directory
