"""Semantic version handling and branch-name derivation.

Release tags are parsed as ``MAJOR.MINOR.PATCH`` with optional pre-release
and build metadata. The next hotfix version always increments the patch
component and drops any pre-release or build suffix, so the result is
strictly greater than the source tag with identical major/minor.

Tag prefixes (such as the common "v") are an explicit policy: only the
prefixes passed in are stripped before parsing. Nothing is coerced.

Branch names are pure functions of the version string, so repeated runs
for the same release resolve to the same branch.

Example:
    >>> next_patch_version("v1.2.3", tag_prefixes=["v"])
    '1.2.4'
    >>> release_branch_name("1.2.4")
    'release-1.2.4'
    >>> conflict_branch_name("release-1.2.4", 42)
    'release-1.2.4-42-conflict'
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from hotfix_release.exceptions import VersionResolutionError

_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)(?:\.(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*))*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True, order=True)
class SemVer:
    """A parsed semantic version.

    Ordering compares the numeric core only; pre-release and build metadata
    are carried for display but never take part in a hotfix bump.
    """

    major: int
    minor: int
    patch: int
    prerelease: str | None = field(default=None, compare=False)
    build: str | None = field(default=None, compare=False)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text = f"{text}-{self.prerelease}"
        if self.build:
            text = f"{text}+{self.build}"
        return text

    def next_patch(self) -> "SemVer":
        return SemVer(self.major, self.minor, self.patch + 1)


def parse_version(text: str) -> SemVer | None:
    """Parse a strict semantic version string, or return None."""
    m = _SEMVER_RE.match(text.strip())
    if m is None:
        return None
    return SemVer(
        major=int(m.group(1)),
        minor=int(m.group(2)),
        patch=int(m.group(3)),
        prerelease=m.group(4),
        build=m.group(5),
    )


def strip_tag_prefix(tag_name: str, tag_prefixes: Sequence[str] = ()) -> str:
    """Remove the first matching configured prefix from a tag name.

    Longer prefixes are tried first so "release-v" wins over "release-".
    """
    for prefix in sorted(tag_prefixes, key=len, reverse=True):
        if prefix and tag_name.startswith(prefix):
            return tag_name[len(prefix) :]
    return tag_name


def next_patch_version(tag_name: str, tag_prefixes: Sequence[str] = ()) -> str:
    """Compute the next patch release version from a release tag.

    Args:
        tag_name: Tag of the latest published release
        tag_prefixes: Prefixes allowed in front of the version (e.g. ["v"])

    Returns:
        The patch-incremented version without prefix or metadata

    Raises:
        VersionResolutionError: If the tag is not a semantic version
    """
    version = parse_version(strip_tag_prefix(tag_name, tag_prefixes))
    if version is None:
        raise VersionResolutionError(
            f"Latest release tag '{tag_name}' is not a semantic version",
            tag_name=tag_name,
        )
    return str(version.next_patch())


def release_branch_name(version: str, prefix: str = "release", separator: str = "-") -> str:
    """Derive the release branch name for a version."""
    return f"{prefix}{separator}{version}"


def conflict_branch_name(release_branch: str, pr_number: int, suffix: str = "conflict") -> str:
    """Derive the conflict-recovery branch name for a pull request."""
    return f"{release_branch}-{pr_number}-{suffix}"
