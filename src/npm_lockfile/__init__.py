"""npm-lockfile - Parser for npm package-lock.json files (lockfile v1, v2, v3)."""

__version__ = "0.3.0"

from npm_lockfile.config import LockfileConfig, load_config
from npm_lockfile.exceptions import ConfigError, DecodeError, LockfileError, ParseError
from npm_lockfile.models import (
    LegacyDependency,
    LockfileSummary,
    PackageLockJson,
    PackageRecord,
    SimpleDependency,
)
from npm_lockfile.normalizer import normalize_engines, normalize_packages, resolve_package_key
from npm_lockfile.parser import PackageLockParser, parse, parse_dependencies, parse_file
from npm_lockfile.projector import project_dependencies, summarize
from npm_lockfile.reconciler import reconcile_versions, unresolved_local_references

__all__ = [
    "__version__",
    "parse",
    "parse_dependencies",
    "parse_file",
    "PackageLockParser",
    "PackageLockJson",
    "LegacyDependency",
    "PackageRecord",
    "SimpleDependency",
    "LockfileSummary",
    "LockfileConfig",
    "load_config",
    "LockfileError",
    "ParseError",
    "DecodeError",
    "ConfigError",
    "normalize_packages",
    "normalize_engines",
    "resolve_package_key",
    "reconcile_versions",
    "unresolved_local_references",
    "project_dependencies",
    "summarize",
]
