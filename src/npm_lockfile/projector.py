"""Flatten a parsed lockfile into simple dependency records."""

from typing import Optional

from npm_lockfile.config import DEFAULT_LOCAL_REFERENCE_PREFIX
from npm_lockfile.models import LockfileSummary, PackageLockJson, SimpleDependency
from npm_lockfile.reconciler import unresolved_local_references


def project_dependencies(lock: PackageLockJson) -> list[SimpleDependency]:
    """Return one SimpleDependency per top-level dependency.

    The legacy ``dependencies`` tree is used when present (v1, v2), otherwise
    the ``packages`` map (v3). The two are never merged since they describe
    the same set. Nested legacy dependencies are not included.
    """
    if lock.dependencies is not None:
        return [
            SimpleDependency(
                name=name,
                version=dependency.version,
                is_dev=dependency.is_dev,
                is_optional=dependency.is_optional,
            )
            for name, dependency in lock.dependencies.items()
        ]

    if lock.packages is not None:
        return [
            SimpleDependency(
                name=name,
                version=package.version,
                is_dev=package.is_dev,
                is_optional=package.is_optional,
            )
            for name, package in lock.packages.items()
        ]

    return []


def summarize(
    lock: PackageLockJson, local_reference_prefix: Optional[str] = None
) -> LockfileSummary:
    """Build a LockfileSummary for display."""
    dependencies = project_dependencies(lock)
    return LockfileSummary(
        name=lock.name,
        version=lock.version,
        lockfile_version=lock.lockfile_version,
        legacy_count=len(lock.dependencies or {}),
        package_count=len(lock.packages or {}),
        dev_count=sum(1 for d in dependencies if d.is_dev),
        optional_count=sum(1 for d in dependencies if d.is_optional),
        unresolved_references=unresolved_local_references(
            lock, local_reference_prefix or DEFAULT_LOCAL_REFERENCE_PREFIX
        ),
    )
