"""
Pull-request publisher stage - open the draft release pull request.

Opens a pull request from the release branch into the mainline branch,
titled from ``release.title_template`` ("Release <version>").

An open pull request for the same head and base is an acceptable end
state: it is detected before creating, and a creation rejected with
"already exists" (a concurrent run) is treated the same way, unless
``release.existing_pull_request_ok`` is disabled.

After a cherry-pick conflict the stage still runs by default
(``release.publish_on_conflict``); the body then points at the conflict
branch.
"""

from pathlib import Path

import structlog

from hotfix_release.config.settings import HotfixSettings
from hotfix_release.engine.context import HotfixContext
from hotfix_release.engine.stages.base import HotfixStage
from hotfix_release.exceptions import PullRequestExistsError
from hotfix_release.models.domain import DraftPullRequest, PublishOutcome, PublishStatus
from hotfix_release.providers.base import GitProvider
from hotfix_release.rendering.engine import MessageTemplateEngine

log = structlog.get_logger(__name__)


class PublisherStage(HotfixStage):
    """Publish the draft release pull request."""

    name = "publisher"

    def __init__(
        self,
        git: GitProvider,
        settings: HotfixSettings,
        templates: MessageTemplateEngine | None = None,
    ) -> None:
        super().__init__(git, settings)
        template_dir = settings.release.template_dir
        self.templates = templates or MessageTemplateEngine(Path(template_dir) if template_dir else None)

    async def execute(self, context: HotfixContext) -> None:
        policy = self.settings.release
        release, version = context.require_release()
        branch = context.require_release_branch()
        base = self.settings.repository.mainline_branch
        conflict = context.cherry_pick.conflict_branch if context.cherry_pick else None

        body = self.templates.render_pull_request_body(
            version=version,
            base_tag=release.tag_name,
            release_branch=branch.name,
            pr_number=context.pull_request.number,
            pr_title=context.pull_request.title,
            commit_sha=context.merge_commit_sha,
            conflict_branch=conflict.name if conflict else None,
        )
        request = DraftPullRequest(
            title=policy.title_template.format(version=version),
            head=branch.name,
            base=base,
            body=body,
            draft=policy.draft,
        )

        if conflict is not None and not policy.publish_on_conflict:
            log.info("publish_skipped_on_conflict", release_branch=branch.name, conflict_branch=conflict.name)
            context.publish = PublishOutcome(
                status=PublishStatus.SKIPPED,
                pull_request=request,
                reason=f"cherry-pick conflicted; resolve on {conflict.name}",
            )
            return

        if policy.existing_pull_request_ok:
            existing = await self.git.find_pull_request(branch.name, base)
            if existing is not None:
                log.info("release_pull_request_exists", number=existing.number, head=branch.name, base=base)
                context.publish = PublishOutcome(status=PublishStatus.ALREADY_EXISTS, pull_request=existing)
                return

        log.info("creating_release_pull_request", title=request.title, head=branch.name, base=base)
        try:
            created = await self.git.create_pull_request(
                title=request.title,
                body=request.body,
                head=request.head,
                base=request.base,
                draft=request.draft,
            )
        except PullRequestExistsError as e:
            if not policy.existing_pull_request_ok:
                raise
            log.info("release_pull_request_created_concurrently", head=branch.name, base=base)
            context.publish = PublishOutcome(
                status=PublishStatus.ALREADY_EXISTS,
                pull_request=request,
                reason=e.message,
            )
            return

        context.publish = PublishOutcome(status=PublishStatus.CREATED, pull_request=created)
        log.info("release_pull_request_created", number=created.number, url=created.url)
