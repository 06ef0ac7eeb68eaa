"""Resolve local path references in the legacy dependency tree."""

import logging

from npm_lockfile.config import DEFAULT_LOCAL_REFERENCE_PREFIX
from npm_lockfile.models import PackageLockJson

logger = logging.getLogger(__name__)


def reconcile_versions(
    lock: PackageLockJson, local_reference_prefix: str = DEFAULT_LOCAL_REFERENCE_PREFIX
) -> PackageLockJson:
    """Replace ``file:`` versions in the legacy tree with real versions.

    Lockfile v2 writes workspace members into ``dependencies`` as
    ``"version": "file:packages/base"`` while ``packages`` has the actual
    version. Only top-level legacy entries are inspected. References with
    no matching ``packages`` entry are left as they are.

    Returns:
        The same ``lock`` object, updated in place.
    """
    if lock.dependencies is None or lock.packages is None:
        return lock

    for name, dependency in lock.dependencies.items():
        if not dependency.version.startswith(local_reference_prefix):
            continue
        package = lock.packages.get(name)
        if package is None:
            continue
        logger.debug(f"Resolved {name} {dependency.version} to {package.version}")
        dependency.version = package.version

    return lock


def unresolved_local_references(
    lock: PackageLockJson, local_reference_prefix: str = DEFAULT_LOCAL_REFERENCE_PREFIX
) -> list[str]:
    """Return names of top-level legacy entries still pointing at a local path."""
    if not lock.dependencies:
        return []
    return sorted(
        name
        for name, dependency in lock.dependencies.items()
        if dependency.version.startswith(local_reference_prefix)
    )
