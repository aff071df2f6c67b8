"""
Version resolver stage - next patch version and release branch name.

Fetches the latest published release, increments the patch component of
its tag and derives the release branch name from the result. The branch
name depends on nothing but the version and the naming policy, so every
run for the same release targets the same branch.
"""

import structlog

from hotfix_release.engine.context import HotfixContext
from hotfix_release.engine.stages.base import HotfixStage
from hotfix_release.models.domain import ReleaseBranch
from hotfix_release.versioning import next_patch_version, release_branch_name

log = structlog.get_logger(__name__)


class VersionResolverStage(HotfixStage):
    """Resolve the release version and branch for this run.

    Raises:
        ReleaseNotFoundError: If the repository has no published release.
        VersionResolutionError: If the latest tag is not a semantic version
            (after stripping a configured tag prefix).
    """

    name = "version_resolver"

    async def execute(self, context: HotfixContext) -> None:
        policy = self.settings.release

        log.debug("getting_latest_release", owner=context.event.owner, repo=context.event.repo)
        release = await self.git.get_latest_release()
        log.info("latest_release", tag=release.tag_name, target=release.target_commitish)

        version = next_patch_version(release.tag_name, policy.tag_prefixes)
        branch = release_branch_name(version, policy.branch_prefix, policy.branch_separator)

        context.release = release
        context.version = version
        context.release_branch = ReleaseBranch(name=branch)

        log.info("release_version_resolved", version=version, release_branch=branch)
