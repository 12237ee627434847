"""Version normalization, change classification and dependency set diffing."""

import re
from typing import List, Mapping, Optional

from packaging.version import InvalidVersion, Version

from .types import ChangeType, DependencyChange, DependencyType, Ecosystem

RANGE_PREFIX_PATTERN = re.compile(r"^[\s^~=<>!]+")

# First run of up to three numeric components, like node-semver's coerce()
COERCE_PATTERN = re.compile(r"(?:^|[^\d])(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?(?:$|[^\d])")

SEMVER_PRERELEASE_PATTERN = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*)"
    r"(?:\+[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*)?$"
)


def clean_version(version: str) -> str:
    """Strip leading range operators and surrounding whitespace.

    Used for equality checks only; ``^1.0.0`` and ``~1.0.0`` clean to the same
    string.

    Args:
        version: Raw version string from a dependency file

    Returns:
        Version without its range prefix
    """
    return RANGE_PREFIX_PATTERN.sub("", version).strip()


def coerce_version(version: str) -> Optional[Version]:
    """Extract a three component release version from an arbitrary string.

    Missing minor or patch components are treated as zero, and anything after
    the numeric core (prerelease tags, build metadata) is dropped.

    Args:
        version: Version string, possibly with a range prefix

    Returns:
        Release version or None if the string contains no number
    """
    match = COERCE_PATTERN.search(clean_version(version))
    if not match:
        return None

    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    return Version(f"{major}.{minor}.{patch}")


def is_prerelease(version: str) -> bool:
    """Check whether a version carries a prerelease tag.

    Accepts semantic versions (``1.0.1-beta.1``) as well as PEP 440 pre and
    dev releases (``2.0.0rc1``).
    """
    version = clean_version(version)
    if SEMVER_PRERELEASE_PATTERN.match(version):
        return True

    try:
        return Version(version).is_prerelease
    except InvalidVersion:
        return False


def _structural_diff(old: Version, new: Version) -> Optional[ChangeType]:
    """Name the most significant component that differs between two releases."""
    if old.major != new.major:
        return ChangeType.MAJOR
    if old.minor != new.minor:
        return ChangeType.MINOR
    if old.micro != new.micro:
        return ChangeType.PATCH
    return None


def determine_change_type(old_version: str, new_version: str) -> ChangeType:
    """Classify the change between two versions of the same dependency.

    A prerelease tag on the new version wins over the numeric difference,
    so ``1.0.0 -> 2.0.0-alpha.1`` is a prerelease, not a major change.

    Args:
        old_version: Previous version string
        new_version: New version string

    Returns:
        Change type; ``other`` when either side is not a version
    """
    coerced_old = coerce_version(old_version)
    coerced_new = coerce_version(new_version)

    if coerced_old is None or coerced_new is None:
        return ChangeType.OTHER

    if is_prerelease(new_version):
        return ChangeType.PRERELEASE

    diff = _structural_diff(coerced_old, coerced_new)
    return diff if diff is not None else ChangeType.OTHER


def compare_versions(
    old_deps: Mapping[str, str],
    new_deps: Mapping[str, str],
    ecosystem: Ecosystem,
    file: str,
    dependency_type: DependencyType,
) -> List[DependencyChange]:
    """Compare two dependency maps from the same file.

    Args:
        old_deps: Dependency name to version before the change
        new_deps: Dependency name to version after the change
        ecosystem: Ecosystem of the file
        file: Repository path of the file
        dependency_type: Dependency type shared by both maps

    Returns:
        Removed and changed entries in ``old_deps`` order, followed by added
        entries in ``new_deps`` order
    """
    changes: List[DependencyChange] = []

    for name, old_version in old_deps.items():
        new_version = new_deps.get(name)

        if new_version is None:
            changes.append(
                DependencyChange(
                    name=name,
                    ecosystem=ecosystem,
                    file=file,
                    old_version=old_version,
                    new_version=None,
                    change_type=ChangeType.REMOVED,
                    dependency_type=dependency_type,
                )
            )
        elif clean_version(old_version) != clean_version(new_version):
            changes.append(
                DependencyChange(
                    name=name,
                    ecosystem=ecosystem,
                    file=file,
                    old_version=old_version,
                    new_version=new_version,
                    change_type=determine_change_type(old_version, new_version),
                    dependency_type=dependency_type,
                )
            )

    for name, new_version in new_deps.items():
        if name not in old_deps:
            changes.append(
                DependencyChange(
                    name=name,
                    ecosystem=ecosystem,
                    file=file,
                    old_version=None,
                    new_version=new_version,
                    change_type=ChangeType.ADDED,
                    dependency_type=dependency_type,
                )
            )

    return changes
