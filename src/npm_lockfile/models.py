"""Data models for npm package-lock.json files.

The same root type covers all three lockfile versions:

* version 1 only has the recursive ``dependencies`` tree,
* version 2 has both ``dependencies`` and the flat ``packages`` map,
* version 3 only has ``packages``.

Each model has a strict ``from_dict`` that raises :class:`DecodeError` on a
wrong JSON type, and a ``to_dict`` that uses npm's own field names.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from npm_lockfile.exceptions import DecodeError

if TYPE_CHECKING:
    from npm_lockfile.config import LockfileConfig


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _expect_object(value: Any, path: str) -> dict:
    if not isinstance(value, dict):
        raise DecodeError(path, f"expected object, got {_type_name(value)}")
    return value


def _optional_str(data: dict, key: str, path: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(_join(path, key), f"expected string, got {_type_name(value)}")
    return value


def _required_str(data: dict, key: str, path: str) -> str:
    if data.get(key) is None:
        raise DecodeError(_join(path, key), "missing field")
    return _optional_str(data, key, path)


def _flag(data: dict, key: str, path: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(_join(path, key), f"expected boolean, got {_type_name(value)}")
    return value


def _string_map(data: dict, key: str, path: str) -> Optional[dict[str, str]]:
    value = data.get(key)
    if value is None:
        return None
    value = _expect_object(value, _join(path, key))
    for name, item in value.items():
        if not isinstance(item, str):
            raise DecodeError(
                _join(_join(path, key), name),
                f"expected string, got {_type_name(item)}",
            )
    return dict(value)


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop absent values and false flags, as npm does when writing."""
    return {k: v for k, v in data.items() if v is not None and v is not False}


@dataclass
class LegacyDependency:
    """A node of the recursive ``dependencies`` tree (lockfile v1/v2)."""

    version: str
    resolved: Optional[str] = None
    integrity: Optional[str] = None
    bundled: bool = False
    is_dev: bool = False
    is_optional: bool = False
    requires: Optional[dict[str, str]] = None
    dependencies: Optional[dict[str, "LegacyDependency"]] = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "") -> "LegacyDependency":
        """Decode a tree node, recursing into nested ``dependencies``."""
        data = _expect_object(data, path)

        nested = None
        raw_nested = data.get("dependencies")
        if raw_nested is not None:
            nested_path = _join(path, "dependencies")
            nested = {
                name: cls.from_dict(child, _join(nested_path, name))
                for name, child in _expect_object(raw_nested, nested_path).items()
            }

        return cls(
            version=_required_str(data, "version", path),
            resolved=_optional_str(data, "resolved", path),
            integrity=_optional_str(data, "integrity", path),
            bundled=_flag(data, "bundled", path),
            is_dev=_flag(data, "dev", path),
            is_optional=_flag(data, "optional", path),
            requires=_string_map(data, "requires", path),
            dependencies=nested,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        nested = None
        if self.dependencies is not None:
            nested = {name: dep.to_dict() for name, dep in self.dependencies.items()}
        return _compact(
            {
                "version": self.version,
                "resolved": self.resolved,
                "integrity": self.integrity,
                "bundled": self.bundled,
                "dev": self.is_dev,
                "optional": self.is_optional,
                "requires": self.requires,
                "dependencies": nested,
            }
        )


@dataclass
class PackageRecord:
    """An entry of the flat ``packages`` map (lockfile v2/v3)."""

    version: str
    name: Optional[str] = None
    resolved: Optional[str] = None
    integrity: Optional[str] = None
    bundled: bool = False
    is_dev: bool = False
    is_optional: bool = False
    is_dev_optional: bool = False
    is_in_bundle: bool = False
    has_install_script: bool = False
    has_shrinkwrap: bool = False
    dependencies: Optional[dict[str, str]] = None
    dev_dependencies: Optional[dict[str, str]] = None
    optional_dependencies: Optional[dict[str, str]] = None
    peer_dependencies: Optional[dict[str, str]] = None
    license: Optional[str] = None
    engines: Optional[dict[str, str]] = None
    bin: Optional[dict[str, str]] = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "") -> "PackageRecord":
        """Decode a single ``packages`` entry.

        ``engines`` must already be an object here; array-shaped values are
        rewritten by :func:`npm_lockfile.normalizer.normalize_engines` first.
        """
        data = _expect_object(data, path)
        return cls(
            version=_required_str(data, "version", path),
            name=_optional_str(data, "name", path),
            resolved=_optional_str(data, "resolved", path),
            integrity=_optional_str(data, "integrity", path),
            bundled=_flag(data, "bundled", path),
            is_dev=_flag(data, "dev", path),
            is_optional=_flag(data, "optional", path),
            is_dev_optional=_flag(data, "devOptional", path),
            is_in_bundle=_flag(data, "inBundle", path),
            has_install_script=_flag(data, "hasInstallScript", path),
            has_shrinkwrap=_flag(data, "hasShrinkwrap", path),
            dependencies=_string_map(data, "dependencies", path),
            dev_dependencies=_string_map(data, "devDependencies", path),
            optional_dependencies=_string_map(data, "optionalDependencies", path),
            peer_dependencies=_string_map(data, "peerDependencies", path),
            license=_optional_str(data, "license", path),
            engines=_string_map(data, "engines", path),
            bin=_string_map(data, "bin", path),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return _compact(
            {
                "name": self.name,
                "version": self.version,
                "resolved": self.resolved,
                "integrity": self.integrity,
                "bundled": self.bundled,
                "dev": self.is_dev,
                "optional": self.is_optional,
                "devOptional": self.is_dev_optional,
                "inBundle": self.is_in_bundle,
                "hasInstallScript": self.has_install_script,
                "hasShrinkwrap": self.has_shrinkwrap,
                "dependencies": self.dependencies,
                "devDependencies": self.dev_dependencies,
                "optionalDependencies": self.optional_dependencies,
                "peerDependencies": self.peer_dependencies,
                "license": self.license,
                "engines": self.engines,
                "bin": self.bin,
            }
        )


@dataclass
class PackageLockJson:
    """Root of a package-lock.json (or npm-shrinkwrap.json) file."""

    name: str
    lockfile_version: int
    version: Optional[str] = None
    dependencies: Optional[dict[str, LegacyDependency]] = None
    packages: Optional[dict[str, PackageRecord]] = None

    @classmethod
    def from_dict(cls, data: Any, config: Optional["LockfileConfig"] = None) -> "PackageLockJson":
        """Decode the root object.

        The ``dependencies`` tree is decoded strictly. The ``packages`` map
        goes through the tolerant normalizer, so one malformed entry only
        drops that entry.
        """
        from npm_lockfile.normalizer import normalize_packages

        data = _expect_object(data, "")
        name = _required_str(data, "name", "")

        lockfile_version = data.get("lockfileVersion")
        if lockfile_version is None:
            raise DecodeError("lockfileVersion", "missing field")
        if isinstance(lockfile_version, bool) or not isinstance(lockfile_version, int):
            raise DecodeError(
                "lockfileVersion", f"expected integer, got {_type_name(lockfile_version)}"
            )

        dependencies = None
        raw_dependencies = data.get("dependencies")
        if raw_dependencies is not None:
            dependencies = {
                name: LegacyDependency.from_dict(node, _join("dependencies", name))
                for name, node in _expect_object(raw_dependencies, "dependencies").items()
            }

        packages = None
        raw_packages = data.get("packages")
        if raw_packages is not None:
            packages = normalize_packages(_expect_object(raw_packages, "packages"), config)

        return cls(
            name=name,
            lockfile_version=lockfile_version,
            version=_optional_str(data, "version", ""),
            dependencies=dependencies,
            packages=packages,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        result: dict[str, Any] = {"name": self.name}
        if self.version is not None:
            result["version"] = self.version
        result["lockfileVersion"] = self.lockfile_version
        if self.packages is not None:
            result["packages"] = {name: pkg.to_dict() for name, pkg in self.packages.items()}
        if self.dependencies is not None:
            result["dependencies"] = {
                name: dep.to_dict() for name, dep in self.dependencies.items()
            }
        return result


@dataclass(frozen=True, order=True)
class SimpleDependency:
    """Flattened view of a top-level dependency."""

    name: str
    version: str
    is_dev: bool = False
    is_optional: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "version": self.version,
            "dev": self.is_dev,
            "optional": self.is_optional,
        }


@dataclass
class LockfileSummary:
    """Counts describing a parsed lockfile."""

    name: str
    version: Optional[str]
    lockfile_version: int
    legacy_count: int = 0
    package_count: int = 0
    dev_count: int = 0
    optional_count: int = 0
    unresolved_references: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "version": self.version,
            "lockfileVersion": self.lockfile_version,
            "legacy_count": self.legacy_count,
            "package_count": self.package_count,
            "dev_count": self.dev_count,
            "optional_count": self.optional_count,
            "unresolved_references": self.unresolved_references,
        }
