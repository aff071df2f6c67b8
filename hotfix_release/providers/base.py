"""
Abstract base class for hosting-platform providers.

This module defines the collaborator interface the hotfix pipeline consumes.
Every operation maps to a single platform call (or, for the cherry-pick, a
fixed sequence of Git Data API calls) and reports failures through the
hotfix_release exception hierarchy, never through platform client types.
"""

from abc import ABC, abstractmethod

from hotfix_release.models.domain import Comment, DraftPullRequest, RefLookup, Release


class GitProvider(ABC):
    """Abstract base class for Git hosting provider implementations.

    A provider instance is bound to one repository (owner/name) at
    construction time and is passed explicitly to every pipeline stage, so
    tests can substitute an in-memory implementation.

    Ref names follow the Git Data API convention: lookups take the short
    form (``heads/<branch>``, ``tags/<tag>``), creation takes the fully
    qualified form (``refs/heads/<branch>``).

    All methods are async; implementations backed by blocking clients run
    them in a worker thread.
    """

    async def connect(self) -> None:
        """Establish the client session. No-op by default."""

    async def disconnect(self) -> None:
        """Release the client session. No-op by default."""

    @abstractmethod
    async def get_latest_release(self) -> Release:
        """Get the latest published release.

        Returns:
            The latest non-draft, non-prerelease release.

        Raises:
            ReleaseNotFoundError: If the repository has no published release.
            GitOperationError: If the API request fails for another reason.
        """
        pass

    @abstractmethod
    async def get_tag_commit_sha(self, tag_name: str) -> str:
        """Resolve a tag to the SHA of the commit it points at.

        Annotated tags are dereferenced to their target commit.

        Args:
            tag_name: Tag name without the "refs/tags/" prefix.

        Returns:
            Full commit SHA.

        Raises:
            GitOperationError: If the tag cannot be resolved.
        """
        pass

    @abstractmethod
    async def get_ref(self, ref: str) -> RefLookup:
        """Look up a git ref.

        Never raises for platform errors. A 404 yields a NOT_FOUND lookup;
        any other failure yields an ERROR lookup carrying the cause.

        Args:
            ref: Short ref name, e.g. "heads/release-1.2.4".

        Returns:
            RefLookup with status FOUND (and sha), NOT_FOUND or ERROR.
        """
        pass

    @abstractmethod
    async def create_ref(self, ref: str, sha: str) -> None:
        """Create a git ref pointing at a commit.

        Args:
            ref: Fully qualified ref, e.g. "refs/heads/release-1.2.4".
            sha: Commit SHA the ref should point at.

        Raises:
            RefAlreadyExistsError: If the ref already exists.
            GitOperationError: If the request fails for another reason
                (invalid SHA, permissions).
        """
        pass

    @abstractmethod
    async def cherry_pick(self, branch: str, commit_sha: str) -> str:
        """Apply a single commit on top of a branch.

        Produces one new commit on the branch with the picked commit's
        changes, message and author, and advances the branch to it. When
        the branch already contains the changes, the branch is left
        untouched.

        Args:
            branch: Branch name without "refs/heads/".
            commit_sha: SHA of the commit to apply.

        Returns:
            SHA of the branch tip after the operation.

        Raises:
            CherryPickConflictError: If the commit does not apply cleanly.
            GitOperationError: If any other step fails.
        """
        pass

    @abstractmethod
    async def add_comment(self, issue_number: int, body: str) -> Comment:
        """Add a comment to an issue or pull request.

        Args:
            issue_number: Issue or pull request number.
            body: Comment text (Markdown supported).

        Returns:
            Created Comment.

        Raises:
            GitOperationError: If the API request fails.
        """
        pass

    @abstractmethod
    async def find_pull_request(self, head: str, base: str) -> DraftPullRequest | None:
        """Find an open pull request for a head/base pair.

        Args:
            head: Source branch name.
            base: Target branch name.

        Returns:
            The open pull request, or None when there is none.

        Raises:
            GitOperationError: If the API request fails.
        """
        pass

    @abstractmethod
    async def create_pull_request(
        self,
        title: str,
        body: str,
        head: str,
        base: str,
        draft: bool = True,
    ) -> DraftPullRequest:
        """Create a pull request.

        Args:
            title: Pull request title.
            body: Pull request description (Markdown supported).
            head: Source branch name.
            base: Target branch name.
            draft: Open the pull request as a draft.

        Returns:
            Created DraftPullRequest with number and URL.

        Raises:
            PullRequestExistsError: If an open pull request already exists
                for the same head and base.
            PullRequestCreationError: If the platform rejects the request
                for another reason (e.g., no commits between the branches).
        """
        pass
