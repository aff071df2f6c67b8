"""Custom exception hierarchy for the hotfix release workflow.

This module defines the error taxonomy used by every pipeline stage. The
hierarchy separates fatal conditions (preconditions, version resolution,
ambiguous branch checks) from the recoverable cherry-pick conflict, so the
pipeline can branch on error type instead of inspecting messages.

Exception Hierarchy:
    HotfixReleaseError (base)
    ├── ConfigurationError
    ├── PreconditionError
    │   ├── UnsupportedEventError
    │   └── NotMergedError
    ├── ResolutionError
    │   ├── VersionResolutionError
    │   └── ReleaseNotFoundError
    ├── BranchCheckError
    ├── GitOperationError
    │   ├── RefAlreadyExistsError
    │   └── CherryPickConflictError
    └── PublishError
        └── PullRequestCreationError
            └── PullRequestExistsError

Example Usage:
    >>> from hotfix_release.exceptions import NotMergedError
    >>> if not event.pull_request.merged:
    ...     raise NotMergedError("Only merged pull requests are supported.")
"""


class HotfixReleaseError(Exception):
    """Base exception for all hotfix-release errors.

    All custom exceptions inherit from this base class, allowing the CLI to
    catch every workflow failure with a single except clause and surface
    one consolidated message.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(HotfixReleaseError):
    """Configuration-related errors.

    Examples:
        - Configuration file not found
        - Invalid YAML syntax
        - Missing API token or repository coordinates
    """

    pass


class PreconditionError(HotfixReleaseError):
    """The triggering event does not qualify for a hotfix release.

    Always fatal. Raised before any remote call is issued.
    """

    pass


class UnsupportedEventError(PreconditionError):
    """Event has no pull_request section or is missing required fields."""

    pass


class NotMergedError(PreconditionError):
    """The pull request in the event was closed without being merged."""

    pass


class ResolutionError(HotfixReleaseError):
    """The next release version could not be determined."""

    pass


class VersionResolutionError(ResolutionError):
    """Latest release tag is not parseable as a semantic version.

    Attributes:
        tag_name: The tag that failed to parse
    """

    def __init__(self, message: str, tag_name: str | None = None) -> None:
        self.tag_name = tag_name
        super().__init__(message)


class ReleaseNotFoundError(ResolutionError):
    """The repository has no published release to derive a version from."""

    pass


class BranchCheckError(HotfixReleaseError):
    """Release branch existence could not be determined.

    Raised when the ref lookup fails for any reason other than "not found"
    (permissions, rate limiting, server errors). Never treated as "absent".

    Attributes:
        ref: The ref that was being checked (e.g., "heads/release-1.2.4")
    """

    def __init__(self, message: str, ref: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            ref: The ref being checked when the error occurred
        """
        self.ref = ref
        full_message = f"{message} (ref: {ref})" if ref else message
        super().__init__(full_message)
        self.message = message


class GitOperationError(HotfixReleaseError):
    """A hosting-platform git operation failed.

    Raised by provider implementations after translating the platform
    client's exception.

    Attributes:
        message: Error message
        status_code: HTTP status code returned by the platform (if any)
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
        """
        self.status_code = status_code

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)
        self.message = message


class RefAlreadyExistsError(GitOperationError):
    """A ref creation was rejected because the ref already exists."""

    pass


class CherryPickConflictError(GitOperationError):
    """Applying the commit onto the target branch produced a conflict.

    Recoverable: the cherry-pick executor answers it with a conflict branch
    and a comment on the originating pull request.

    Attributes:
        commit_sha: The commit that failed to apply
        branch: The branch it was being applied to
    """

    def __init__(
        self,
        message: str,
        commit_sha: str | None = None,
        branch: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.commit_sha = commit_sha
        self.branch = branch
        super().__init__(message, status_code=status_code)


class PublishError(HotfixReleaseError):
    """The draft release pull request could not be published."""

    pass


class PullRequestCreationError(PublishError):
    """The platform rejected the pull request creation request.

    Attributes:
        status_code: HTTP status code returned by the platform (if any)
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)
        self.message = message


class PullRequestExistsError(PullRequestCreationError):
    """An open pull request already exists for the same head and base."""

    pass
