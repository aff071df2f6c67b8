"""
Context extractor stage - validate the triggering event.

A pure validation gate: it issues no remote call, so an unsupported or
unmerged event aborts the run before anything is read or written. The CLI
calls validate_event before it builds a provider.
"""

import structlog

from hotfix_release.engine.context import HotfixContext
from hotfix_release.engine.stages.base import HotfixStage
from hotfix_release.exceptions import NotMergedError, UnsupportedEventError
from hotfix_release.models.domain import PullRequestInfo, TriggerEvent

log = structlog.get_logger(__name__)


def validate_event(event: TriggerEvent) -> PullRequestInfo:
    """Return the event's pull request if it is merged with a merge commit.

    Raises:
        UnsupportedEventError: No pull_request section, or no merge_commit_sha.
        NotMergedError: The pull request was closed without merging.
    """
    pull_request = event.pull_request

    if pull_request is None:
        raise UnsupportedEventError("Only pull_request events are supported.")

    if not pull_request.merged:
        raise NotMergedError(
            f"Pull request #{pull_request.number} is not merged; only merged pull requests are supported."
        )

    if not pull_request.merge_commit_sha:
        raise UnsupportedEventError(f"Merged pull request #{pull_request.number} has no merge_commit_sha.")

    return pull_request


class ContextExtractorStage(HotfixStage):
    """Check that the event describes a merged pull request."""

    name = "context_extractor"

    async def execute(self, context: HotfixContext) -> None:
        pull_request = validate_event(context.event)
        log.debug(
            "event_accepted",
            pull_request=pull_request.number,
            merge_commit=pull_request.merge_commit_sha,
        )
