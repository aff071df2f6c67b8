"""
Base class for pipeline stages.

This module provides the HotfixStage abstract base class that defines the
interface shared by the five pipeline stages.

Stage Lifecycle:
    Stages are instantiated once by the pipeline and executed in a fixed
    order for a single trigger event:

    1. ContextExtractorStage - validate the event
    2. VersionResolverStage - next patch version and branch name
    3. BranchReconcilerStage - ensure the release branch exists
    4. CherryPickStage - apply the merge commit, or recover from a conflict
    5. PublisherStage - open the draft release pull request

    Each stage reads the outputs of earlier stages from the HotfixContext
    and records its own. Fatal failures are raised as HotfixReleaseError
    subclasses and stop the pipeline; the cherry-pick conflict is handled
    inside its stage and recorded as an outcome instead.

Idempotency:
    A stage must be safe to re-run for the same event: existence checks
    before creation, and "already exists" answers treated as success.
"""

from abc import ABC, abstractmethod

from hotfix_release.config.settings import HotfixSettings
from hotfix_release.engine.context import HotfixContext
from hotfix_release.providers.base import GitProvider


class HotfixStage(ABC):
    """Abstract base class for all pipeline stages.

    Attributes:
        git: Hosting-platform provider bound to the event's repository.
        settings: Release policy and repository configuration.
        name: Stage name used in logs.
    """

    name: str = "stage"

    def __init__(self, git: GitProvider, settings: HotfixSettings) -> None:
        """Initialize the stage with its collaborators.

        Args:
            git: Provider for all remote reads and writes.
            settings: Configuration object.

        Note:
            Stages hold no per-run state; everything a run produces lives
            on the HotfixContext.
        """
        self.git = git
        self.settings = settings

    @abstractmethod
    async def execute(self, context: HotfixContext) -> None:
        """Execute this stage for the run described by ``context``.

        Args:
            context: The run context. The stage records its output on it.

        Raises:
            HotfixReleaseError: On a fatal failure of this stage.
        """
        pass
