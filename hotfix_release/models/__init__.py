"""Core domain models for the hotfix release workflow.

This package defines the data models for the remote resources the workflow
reads and creates, and for the outcome of each pipeline stage.

Key Models:
    - TriggerEvent: Validated input of a run (owner, repo, pull request)
    - Release: Latest published release
    - ReleaseBranch: Target branch for the hotfix
    - ConflictBranch: Recovery branch created on cherry-pick failure
    - DraftPullRequest: Release pull request back to mainline
    - RefLookup: Explicit found / not found / error lookup result

Enums:
    - BranchState: Release branch reconciliation state
    - CherryPickStatus: Cherry-pick outcome
    - PublishStatus: Pull request publishing outcome

Example:
    >>> from hotfix_release.models.domain import TriggerEvent
    >>> event = TriggerEvent.from_payload(payload)
"""
