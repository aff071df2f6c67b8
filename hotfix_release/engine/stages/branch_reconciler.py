"""
Branch reconciler stage - ensure the release branch exists.

State machine:
    UNKNOWN --lookup found--------------------------> EXISTS
    UNKNOWN --lookup not found--> create ref -------> CREATED
    UNKNOWN --lookup not found--> create ref races--> EXISTS
    UNKNOWN --lookup error--------------------------> BranchCheckError

Only a genuine "not found" leads to creation. Any other lookup failure
(permissions, rate limiting, server errors) is fatal, because creating a
branch on the strength of an ambiguous answer could mask the real failure.

The check-then-create sequence is not atomic against the platform. When
another run creates the branch between the two calls, the creation is
rejected with "already exists" and the branch is recorded as existing.
"""

import re

import structlog

from hotfix_release.engine.context import HotfixContext
from hotfix_release.engine.stages.base import HotfixStage
from hotfix_release.exceptions import BranchCheckError, RefAlreadyExistsError
from hotfix_release.models.domain import BranchState, Release

log = structlog.get_logger(__name__)

_SHA_RE = re.compile(r"^[0-9a-f]{40}$")


class BranchReconcilerStage(HotfixStage):
    """Create the release branch unless it already exists.

    New branches start at the base commit chosen by
    ``release.base_ref_strategy``:

    - ``tag`` (default): the commit the release tag points at, so the
      branch starts exactly at the released code.
    - ``target_commitish``: the release's target, a commit SHA or a branch
      name resolved to its current tip.
    """

    name = "branch_reconciler"

    async def execute(self, context: HotfixContext) -> None:
        release, _ = context.require_release()
        branch = context.require_release_branch()

        log.debug("checking_release_branch", release_branch=branch.name)
        lookup = await self.git.get_ref(branch.ref)

        if lookup.exists:
            branch.base_sha = lookup.sha
            branch.state = BranchState.EXISTS
            log.info("release_branch_exists", release_branch=branch.name, sha=lookup.sha)
            return

        if not lookup.missing:
            raise BranchCheckError(
                f"Cannot determine whether release branch {branch.name} exists: {lookup.error}",
                ref=branch.ref,
            )

        base_sha = await self._resolve_base_sha(release)
        log.info("creating_release_branch", release_branch=branch.name, base_sha=base_sha)

        try:
            await self.git.create_ref(f"refs/{branch.ref}", base_sha)
        except RefAlreadyExistsError:
            log.info("release_branch_created_concurrently", release_branch=branch.name)
            branch.base_sha = base_sha
            branch.state = BranchState.EXISTS
            return

        branch.base_sha = base_sha
        branch.state = BranchState.CREATED
        log.info("release_branch_created", release_branch=branch.name, sha=base_sha)

    async def _resolve_base_sha(self, release: Release) -> str:
        """Pick the commit a new release branch starts from."""
        if self.settings.release.base_ref_strategy == "tag":
            return await self.git.get_tag_commit_sha(release.tag_name)

        target = release.target_commitish
        if _SHA_RE.match(target):
            return target

        ref = f"heads/{target}"
        lookup = await self.git.get_ref(ref)
        if not lookup.exists or lookup.sha is None:
            raise BranchCheckError(
                f"Cannot resolve release target {target}: {lookup.error or 'branch not found'}",
                ref=ref,
            )
        return lookup.sha
