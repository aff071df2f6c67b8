"""Pipeline stages for the hotfix release workflow.

This package contains the five stages the pipeline runs in order:

    - ContextExtractorStage: Validate the triggering event
    - VersionResolverStage: Next patch version and release branch name
    - BranchReconcilerStage: Ensure the release branch exists
    - CherryPickStage: Apply the merge commit or open a conflict branch
    - PublisherStage: Open the draft release pull request

Each stage inherits from HotfixStage and records its output on the
HotfixContext.

Example:
    >>> from hotfix_release.engine.stages.version_resolver import VersionResolverStage
    >>> stage = VersionResolverStage(git, settings)
    >>> await stage.execute(context)
"""
