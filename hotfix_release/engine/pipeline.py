"""
Hotfix pipeline - run the five stages for one trigger event.

The pipeline is strictly sequential. A fatal error in any stage stops the
run and propagates to the caller; nothing already done is rolled back.
A cherry-pick conflict is not fatal: it is recorded on the context and the
run continues to the publisher.

Example:
    >>> pipeline = HotfixPipeline(git, settings)
    >>> context = await pipeline.run(event)
    >>> context.summary()["release_branch"]
    'release-1.2.4'
"""

import structlog

from hotfix_release.config.settings import HotfixSettings
from hotfix_release.engine.context import HotfixContext
from hotfix_release.engine.stages.base import HotfixStage
from hotfix_release.engine.stages.branch_reconciler import BranchReconcilerStage
from hotfix_release.engine.stages.cherry_pick import CherryPickStage
from hotfix_release.engine.stages.context_extractor import ContextExtractorStage
from hotfix_release.engine.stages.publisher import PublisherStage
from hotfix_release.engine.stages.version_resolver import VersionResolverStage
from hotfix_release.exceptions import PublishError
from hotfix_release.models.domain import TriggerEvent
from hotfix_release.providers.base import GitProvider
from hotfix_release.rendering.engine import MessageTemplateEngine

log = structlog.get_logger(__name__)


class HotfixPipeline:
    """Sequence the hotfix stages against one repository.

    Attributes:
        git: Provider bound to the event's repository.
        settings: Release policy and repository configuration.
        stages: The stages in execution order.
    """

    def __init__(
        self,
        git: GitProvider,
        settings: HotfixSettings,
        templates: MessageTemplateEngine | None = None,
    ) -> None:
        self.git = git
        self.settings = settings
        self.stages: list[HotfixStage] = [
            ContextExtractorStage(git, settings),
            VersionResolverStage(git, settings),
            BranchReconcilerStage(git, settings),
            CherryPickStage(git, settings, templates),
            PublisherStage(git, settings, templates),
        ]

    async def run(self, event: TriggerEvent, dry_run: bool = False) -> HotfixContext:
        """Run every stage for ``event`` and return the finished context.

        With ``dry_run`` the run stops after the version resolver, so only
        read calls reach the platform.

        Raises:
            HotfixReleaseError: The first fatal stage failure.
        """
        context = HotfixContext(event=event, dry_run=dry_run)
        pr_number = event.pull_request.number if event.pull_request else None

        structlog.contextvars.bind_contextvars(owner=event.owner, repo=event.repo, pull_request=pr_number)
        try:
            log.info("hotfix_started", dry_run=dry_run)
            for stage in self.stages:
                log.debug("stage_started", stage=stage.name)
                await self._execute(stage, context)
                if dry_run and isinstance(stage, VersionResolverStage):
                    log.info("dry_run_stopped", stage=stage.name, **context.summary())
                    return context
            log.info("hotfix_finished", **context.summary())
            return context
        finally:
            structlog.contextvars.unbind_contextvars("owner", "repo", "pull_request")

    async def _execute(self, stage: HotfixStage, context: HotfixContext) -> None:
        try:
            await stage.execute(context)
        except PublishError as e:
            if context.cherry_pick is None or not context.cherry_pick.conflicted:
                raise
            conflict = context.cherry_pick.conflict_branch
            log.error("publish_failed_after_conflict", conflict_branch=conflict.name, error=e.message)
            raise PublishError(
                f"{e.message}; the cherry-pick also conflicted, resolve it on {conflict.name}"
            ) from e
