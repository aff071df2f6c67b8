"""
Cherry-pick executor stage - apply the merge commit to the release branch.

On success the release branch advances by one commit (or stays put when
a previous run already applied the change).

Any failure of the cherry-pick itself, conflict or otherwise, switches to
the recovery path instead of failing the run:

1. A conflict branch named ``<release branch>-<PR number>-<suffix>`` is
   created at the raw merge commit. The release branch is never touched.
2. A comment on the originating pull request names both branches and
   gives the manual resolution recipe.

The pipeline then continues to the publisher. The conflict branch name is
unique per pull request, so a re-run for the same pull request finds and
reuses its own branch while other pull requests get their own.
"""

from pathlib import Path

import structlog

from hotfix_release.config.settings import HotfixSettings
from hotfix_release.engine.context import HotfixContext
from hotfix_release.engine.stages.base import HotfixStage
from hotfix_release.exceptions import GitOperationError, RefAlreadyExistsError
from hotfix_release.models.domain import CherryPickOutcome, CherryPickStatus, ConflictBranch
from hotfix_release.providers.base import GitProvider
from hotfix_release.rendering.engine import MessageTemplateEngine
from hotfix_release.versioning import conflict_branch_name

log = structlog.get_logger(__name__)


class CherryPickStage(HotfixStage):
    """Apply the pull request's merge commit onto the release branch."""

    name = "cherry_pick"

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
        branch = context.require_release_branch()
        commit_sha = context.merge_commit_sha

        log.info(
            "cherry_picking",
            pull_request=context.pull_request.number,
            release_branch=branch.name,
            commit=commit_sha,
        )

        try:
            head_sha = await self.git.cherry_pick(branch.name, commit_sha)
        except GitOperationError as e:
            log.warning(
                "cherry_pick_failed",
                release_branch=branch.name,
                commit=commit_sha,
                error=e.message,
            )
            conflict = await self._recover(context, branch.name, commit_sha)
            context.cherry_pick = CherryPickOutcome(
                status=CherryPickStatus.CONFLICT,
                commit_sha=commit_sha,
                head_sha=branch.base_sha,
                conflict_branch=conflict,
                error=str(e),
            )
            return

        status = CherryPickStatus.ALREADY_APPLIED if head_sha == branch.base_sha else CherryPickStatus.APPLIED
        context.cherry_pick = CherryPickOutcome(status=status, commit_sha=commit_sha, head_sha=head_sha)
        log.info("cherry_pick_done", release_branch=branch.name, status=status.value, head=head_sha)

    async def _recover(self, context: HotfixContext, release_branch: str, commit_sha: str) -> ConflictBranch:
        """Create the conflict branch and ask for a manual resolution."""
        pr_number = context.pull_request.number
        name = conflict_branch_name(release_branch, pr_number, self.settings.release.conflict_suffix)

        reused = False
        try:
            await self.git.create_ref(f"refs/heads/{name}", commit_sha)
        except RefAlreadyExistsError:
            log.info("conflict_branch_exists", conflict_branch=name)
            reused = True
        else:
            log.info("conflict_branch_created", conflict_branch=name, sha=commit_sha)

        body = self.templates.render_conflict_comment(
            commit_sha=commit_sha,
            pr_number=pr_number,
            release_branch=release_branch,
            conflict_branch=name,
        )
        await self.git.add_comment(pr_number, body)
        log.info("conflict_comment_posted", pull_request=pr_number, conflict_branch=name)

        return ConflictBranch(name=name, sha=commit_sha, reused=reused)
