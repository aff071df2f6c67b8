"""GitHub provider implementation using PyGithub and REST API."""

import asyncio
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

import requests
import structlog
from github import Auth, Github, GithubException, InputGitAuthor  # type: ignore[import-not-found]
from github.GitCommit import GitCommit  # type: ignore[import-not-found]
from github.PullRequest import PullRequest as GHPullRequest  # type: ignore[import-not-found]
from github.Repository import Repository as GHRepository  # type: ignore[import-not-found]

from hotfix_release.exceptions import (
    CherryPickConflictError,
    GitOperationError,
    PullRequestCreationError,
    PullRequestExistsError,
    RefAlreadyExistsError,
    ReleaseNotFoundError,
)
from hotfix_release.models.domain import Comment, DraftPullRequest, RefLookup, Release
from hotfix_release.providers.base import GitProvider

log = structlog.get_logger(__name__)

T = TypeVar("T")


async def _run_sync(func: Callable[[], T]) -> T:
    """Run a synchronous function in a thread pool.

    This prevents blocking the event loop when calling synchronous
    PyGithub methods.
    """
    return await asyncio.to_thread(func)


def _error_messages(error: GithubException) -> list[str]:
    """Collect the human-readable messages of a GitHub API error response."""
    data = error.data
    if not isinstance(data, dict):
        return [str(data)] if data else []

    messages = []
    if data.get("message"):
        messages.append(str(data["message"]))
    for detail in data.get("errors") or []:
        if isinstance(detail, dict) and detail.get("message"):
            messages.append(str(detail["message"]))
        elif isinstance(detail, str):
            messages.append(detail)
    return messages


def _describe(error: GithubException) -> str:
    return "; ".join(_error_messages(error)) or str(error)


class GitHubRestProvider(GitProvider):
    """GitHub implementation using PyGithub library."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        base_url: str = "https://api.github.com",
    ):
        """Initialize GitHub provider.

        Args:
            token: GitHub personal access token, App token or Actions GITHUB_TOKEN
            owner: Repository owner (user or organization)
            repo: Repository name
            base_url: GitHub API base URL (for GitHub Enterprise)
        """
        self.token = token.strip() if token else token
        self.owner = owner
        self.repo = repo
        # Pydantic HttpUrl adds a trailing slash
        self.base_url = base_url.rstrip("/")
        self._client: Github | None = None
        self._repo: GHRepository | None = None

    async def connect(self) -> None:
        """Initialize GitHub client."""

        def _connect() -> tuple[Github, GHRepository]:
            client = Github(auth=Auth.Token(self.token), base_url=self.base_url)
            repo = client.get_repo(f"{self.owner}/{self.repo}")
            return client, repo

        try:
            self._client, self._repo = await _run_sync(_connect)
        except GithubException as e:
            log.error("github_connect_failed", owner=self.owner, repo=self.repo, error=_describe(e))
            raise GitOperationError(
                f"Cannot access repository {self.owner}/{self.repo}: {_describe(e)}",
                status_code=e.status,
            ) from e

        log.info(
            "github_connected",
            base_url=self.base_url,
            owner=self.owner,
            repo=self.repo,
        )

    async def disconnect(self) -> None:
        """Close GitHub client."""
        if self._client:
            await _run_sync(self._client.close)
            self._client = None
            self._repo = None

    @property
    def repository(self) -> GHRepository:
        if self._repo is None:
            raise GitOperationError("GitHub provider is not connected; call connect() first")
        return self._repo

    async def get_latest_release(self) -> Release:
        """Get the latest published release."""
        log.info("get_latest_release")
        repo = self.repository

        try:
            gh_release = await _run_sync(repo.get_latest_release)
        except GithubException as e:
            if e.status == 404:
                raise ReleaseNotFoundError(f"No published release found in {self.owner}/{self.repo}") from e
            log.error("github_get_latest_release_failed", error=_describe(e))
            raise GitOperationError(f"Failed to get latest release: {_describe(e)}", status_code=e.status) from e

        return Release(tag_name=gh_release.tag_name, target_commitish=gh_release.target_commitish)

    async def get_tag_commit_sha(self, tag_name: str) -> str:
        """Resolve a tag to its commit, following annotated tag objects."""
        log.info("get_tag_commit_sha", tag=tag_name)
        repo = self.repository

        def _resolve() -> str:
            git_ref = repo.get_git_ref(f"tags/{tag_name}")
            if git_ref.ref != f"refs/tags/{tag_name}":
                raise GitOperationError(f"Tag {tag_name} not found", status_code=404)

            obj_type, sha = git_ref.object.type, git_ref.object.sha
            while obj_type == "tag":
                tag = repo.get_git_tag(sha)
                obj_type, sha = tag.object.type, tag.object.sha
            return sha

        try:
            return await _run_sync(_resolve)
        except GithubException as e:
            log.error("github_get_tag_failed", tag=tag_name, error=_describe(e))
            raise GitOperationError(
                f"Failed to resolve tag {tag_name}: {_describe(e)}", status_code=e.status
            ) from e

    async def get_ref(self, ref: str) -> RefLookup:
        """Look up a ref, reporting 404 separately from other failures.

        Branch refs go through the branches endpoint, which matches names
        exactly; the refs endpoint answers a missing ref with every ref
        sharing its prefix.
        """
        log.info("get_ref", ref=ref)
        repo = self.repository

        def _lookup() -> RefLookup:
            if ref.startswith("heads/"):
                branch = repo.get_branch(ref[len("heads/") :])
                return RefLookup.found(ref, branch.commit.sha)

            git_ref = repo.get_git_ref(ref)
            if git_ref.ref != f"refs/{ref}":
                return RefLookup.not_found(ref)
            return RefLookup.found(ref, git_ref.object.sha)

        try:
            return await _run_sync(_lookup)
        except GithubException as e:
            if e.status == 404:
                log.debug("github_ref_not_found", ref=ref)
                return RefLookup.not_found(ref)
            log.error("github_get_ref_failed", ref=ref, status=e.status, error=_describe(e))
            return RefLookup.failed(ref, _describe(e), status_code=e.status)

    async def create_ref(self, ref: str, sha: str) -> None:
        """Create a ref pointing at a commit."""
        log.info("create_ref", ref=ref, sha=sha)
        repo = self.repository

        try:
            await _run_sync(lambda: repo.create_git_ref(ref=ref, sha=sha))
        except GithubException as e:
            description = _describe(e)
            if e.status == 422 and "already exists" in description.lower():
                raise RefAlreadyExistsError(f"Reference {ref} already exists", status_code=e.status) from e
            log.error("github_create_ref_failed", ref=ref, sha=sha, error=description)
            raise GitOperationError(f"Failed to create {ref}: {description}", status_code=e.status) from e

    async def cherry_pick(self, branch: str, commit_sha: str) -> str:
        """Cherry-pick a commit onto a branch using the Git Data API.

        The platform has no cherry-pick endpoint, so the pick is emulated
        with a three-way merge on a temporary branch:

        1. Create a temporary branch at the target branch tip.
        2. Point it at a sibling commit that has the tip's tree and the
           picked commit's first parent as its parent.
        3. Merge the picked commit into the temporary branch. The merge base
           is the picked commit's parent, so the resulting tree is the tip's
           tree plus exactly the picked commit's changes.
        4. Commit that tree on top of the real tip with the original message
           and author, and fast-forward the branch to it.

        The temporary branch is deleted whatever the outcome.
        """
        log.info("cherry_pick", branch=branch, commit=commit_sha)
        repo = self.repository

        def _cherry_pick() -> str:
            head_ref = repo.get_git_ref(f"heads/{branch}")
            head_sha = head_ref.object.sha
            head_commit = repo.get_git_commit(head_sha)

            picked = repo.get_git_commit(commit_sha)
            if not picked.parents:
                raise GitOperationError(f"Commit {commit_sha} has no parent and cannot be cherry-picked")

            temp_branch = f"cherry-pick-{commit_sha[:12]}-{uuid.uuid4().hex[:8]}"
            temp_ref = repo.create_git_ref(ref=f"refs/heads/{temp_branch}", sha=head_sha)
            try:
                sibling = repo.create_git_commit(
                    message=f"sibling of {commit_sha}",
                    tree=head_commit.tree,
                    parents=[picked.parents[0]],
                )
                temp_ref.edit(sibling.sha, force=True)

                try:
                    merge = repo.merge(
                        base=temp_branch,
                        head=commit_sha,
                        commit_message=f"Merge {commit_sha} into {temp_branch}",
                    )
                except GithubException as e:
                    if e.status == 409:
                        raise CherryPickConflictError(
                            f"Commit {commit_sha} does not apply cleanly on {branch}",
                            commit_sha=commit_sha,
                            branch=branch,
                            status_code=e.status,
                        ) from e
                    raise

                if merge is None or merge.commit.tree.sha == head_commit.tree.sha:
                    log.info("cherry_pick_empty", branch=branch, commit=commit_sha)
                    return head_sha

                new_commit = repo.create_git_commit(
                    message=picked.message,
                    tree=merge.commit.tree,
                    parents=[head_commit],
                    author=self._author_of(picked),
                )
                head_ref.edit(new_commit.sha, force=False)
                return new_commit.sha
            finally:
                self._delete_temporary_ref(temp_ref, temp_branch)

        try:
            new_sha = await _run_sync(_cherry_pick)
        except GithubException as e:
            log.error("github_cherry_pick_failed", branch=branch, commit=commit_sha, error=_describe(e))
            raise GitOperationError(
                f"Failed to cherry-pick {commit_sha} onto {branch}: {_describe(e)}",
                status_code=e.status,
            ) from e
        except requests.exceptions.RequestException as e:
            log.error("github_cherry_pick_failed", branch=branch, commit=commit_sha, error=str(e))
            raise GitOperationError(f"Failed to cherry-pick {commit_sha} onto {branch}: {e}") from e

        log.info("cherry_pick_completed", branch=branch, commit=commit_sha, head=new_sha)
        return new_sha

    async def add_comment(self, issue_number: int, body: str) -> Comment:
        """Add comment to issue or pull request."""
        log.info("add_comment", number=issue_number)
        repo = self.repository

        def _add_comment() -> Any:
            gh_issue = repo.get_issue(issue_number)
            return gh_issue.create_comment(body)

        try:
            gh_comment = await _run_sync(_add_comment)
        except GithubException as e:
            log.error("github_add_comment_failed", number=issue_number, error=_describe(e))
            raise GitOperationError(
                f"Failed to comment on #{issue_number}: {_describe(e)}", status_code=e.status
            ) from e

        return Comment(id=gh_comment.id, body=gh_comment.body, url=gh_comment.html_url or "")

    async def find_pull_request(self, head: str, base: str) -> DraftPullRequest | None:
        """Find the open pull request for a head/base pair."""
        log.info("find_pull_request", head=head, base=base)
        repo = self.repository

        def _find() -> GHPullRequest | None:
            pulls = repo.get_pulls(state="open", head=f"{self.owner}:{head}", base=base)
            for gh_pr in pulls:
                return gh_pr
            return None

        try:
            gh_pr = await _run_sync(_find)
        except GithubException as e:
            log.error("github_find_pr_failed", head=head, base=base, error=_describe(e))
            raise GitOperationError(f"Failed to list pull requests: {_describe(e)}", status_code=e.status) from e

        return self._convert_pull_request(gh_pr) if gh_pr is not None else None

    async def create_pull_request(
        self,
        title: str,
        body: str,
        head: str,
        base: str,
        draft: bool = True,
    ) -> DraftPullRequest:
        """Create a pull request."""
        log.info("create_pull_request", title=title, head=head, base=base, draft=draft)
        repo = self.repository

        try:
            gh_pr = await _run_sync(
                lambda: repo.create_pull(
                    title=title,
                    body=body,
                    head=head,
                    base=base,
                    draft=draft,
                )
            )
        except GithubException as e:
            description = _describe(e)
            if e.status == 422 and "already exists" in description.lower():
                raise PullRequestExistsError(
                    f"A pull request from {head} to {base} already exists", status_code=e.status
                ) from e
            log.error("github_create_pr_failed", head=head, base=base, error=description)
            raise PullRequestCreationError(
                f"Failed to create pull request from {head} to {base}: {description}",
                status_code=e.status,
            ) from e

        return self._convert_pull_request(gh_pr)

    def _delete_temporary_ref(self, temp_ref: Any, temp_branch: str) -> None:
        try:
            temp_ref.delete()
        except (GithubException, requests.exceptions.RequestException) as e:
            log.warning("github_temporary_ref_cleanup_failed", branch=temp_branch, error=str(e))

    @staticmethod
    def _author_of(commit: GitCommit) -> InputGitAuthor:
        """Carry the picked commit's author onto the new commit."""
        author = commit.author
        date = author.date.strftime("%Y-%m-%dT%H:%M:%SZ") if isinstance(author.date, datetime) else author.date
        return InputGitAuthor(author.name, author.email, date)

    def _convert_pull_request(self, gh_pr: GHPullRequest) -> DraftPullRequest:
        """Convert GitHub PullRequest to our DraftPullRequest model."""
        return DraftPullRequest(
            title=gh_pr.title,
            head=gh_pr.head.ref,
            base=gh_pr.base.ref,
            body=gh_pr.body or "",
            draft=bool(gh_pr.draft),
            number=gh_pr.number,
            url=gh_pr.html_url,
        )
