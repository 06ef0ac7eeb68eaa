"""Tolerant normalization of the flat ``packages`` map.

npm keys this map by install location (``node_modules/@scope/name``,
``node_modules/a/node_modules/b``, ``packages/workspace``). This module turns
it into a map keyed by package name and keeps going when a single entry is
malformed.
"""

import logging
from typing import Any, Optional

from npm_lockfile.config import DEFAULT_INSTALL_PREFIX, LockfileConfig
from npm_lockfile.exceptions import DecodeError
from npm_lockfile.models import PackageRecord

logger = logging.getLogger(__name__)

ENGINE_NOT_FOUND = "not_found"


def normalize_engines(raw: dict[str, Any], key: str = "") -> None:
    """Rewrite an array-shaped ``engines`` field into an object, in place.

    Some published packages declare ``"engines": ["node >=0.6.0"]``. Each
    element is split on its first space into engine name and constraint;
    elements that do not split are stored under ``not_found``. An empty
    array becomes an absent field. Object-shaped values are left alone.
    """
    engines = raw.get("engines")
    if not isinstance(engines, list):
        return

    logger.warning(f"Found engines as an array instead of an object, fixing it ({key})")

    if not engines:
        del raw["engines"]
        return

    fixed: dict[str, str] = {}
    for engine in engines:
        parts = engine.split(" ", 1) if isinstance(engine, str) else []
        if len(parts) == 2:
            fixed[parts[0]] = parts[1]
        else:
            fixed[ENGINE_NOT_FOUND] = ENGINE_NOT_FOUND
    raw["engines"] = fixed


def resolve_package_key(
    key: str, record: PackageRecord, install_prefix: str = DEFAULT_INSTALL_PREFIX
) -> Optional[str]:
    """Map a ``packages`` key to the package name it should be exposed as.

    Returns:
        The package name, or None when the key is a nested install location
        that must not appear in the normalized map.
    """
    if key.startswith(install_prefix):
        name = key[len(install_prefix):]
        if install_prefix in name:
            return None
        return name

    # Workspace members are keyed by path but carry their own name
    return record.name or key


def normalize_packages(
    raw_packages: dict[str, Any], config: Optional[LockfileConfig] = None
) -> dict[str, PackageRecord]:
    """Decode the raw ``packages`` object into name-keyed records.

    Entries are processed in input order. Bad entries are logged and
    dropped; when two entries resolve to the same name the later one wins.

    Args:
        raw_packages: The ``packages`` object as decoded by ``json``.
        config: Parser settings; defaults are used when omitted.

    Returns:
        Mapping of package name to PackageRecord.
    """
    config = config or LockfileConfig()
    packages: dict[str, PackageRecord] = {}

    for key, value in raw_packages.items():
        if key == "":
            logger.info("Skipping root project information in packages")
            continue

        if isinstance(value, dict):
            if value.get("link") is True:
                logger.info(f"Skipping workspace link {key} -> {value.get('resolved')}")
                continue
            value = dict(value)
            normalize_engines(value, key)

        try:
            record = PackageRecord.from_dict(value, key)
        except DecodeError as e:
            logger.error(f"Could not parse this dependency: {value!r}, ERROR: {e}")
            continue

        name = resolve_package_key(key, record, config.install_prefix)
        if name is None:
            logger.debug(f"Dropping nested install location {key}")
            continue

        if name in packages:
            logger.debug(f"Package {name} from {key} replaces an earlier entry")
        packages[name] = record

    return packages
