"""npm package-lock.json parser."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from npm_lockfile.config import LockfileConfig
from npm_lockfile.exceptions import DecodeError, ParseError
from npm_lockfile.models import PackageLockJson, SimpleDependency
from npm_lockfile.projector import project_dependencies
from npm_lockfile.reconciler import reconcile_versions

logger = logging.getLogger(__name__)

SUPPORTED_LOCKFILE_VERSIONS = (1, 2, 3)


class PackageLockParser:
    """Parser for package-lock.json and npm-shrinkwrap.json files.

    Supports lockfile versions 1, 2 and 3.
    """

    def __init__(self, config: Optional[LockfileConfig] = None) -> None:
        """Initialize the parser.

        Args:
            config: Parser settings. Defaults are used when omitted.
        """
        self.config = config or LockfileConfig()

    def parse(self, content: Union[str, bytes]) -> PackageLockJson:
        """Parse lockfile content into the full data model.

        Args:
            content: The lockfile text, or raw bytes in any encoding
                ``json`` detects. A leading byte order mark is ignored.

        Returns:
            The decoded lockfile, with local references reconciled.

        Raises:
            ParseError: If the content is not valid JSON or the root object
                cannot be decoded.
        """
        if isinstance(content, str):
            content = content.removeprefix("\ufeff")

        try:
            data = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            raise ParseError("Error parsing file", e) from e

        try:
            lock = PackageLockJson.from_dict(data, self.config)
        except (DecodeError, RecursionError) as e:
            raise ParseError("Error parsing file", e) from e

        if lock.lockfile_version not in SUPPORTED_LOCKFILE_VERSIONS:
            logger.warning(f"Unknown lockfileVersion {lock.lockfile_version} in {lock.name}")

        if self.config.reconcile:
            reconcile_versions(lock, self.config.local_reference_prefix)

        return lock

    def parse_dependencies(self, content: Union[str, bytes]) -> list[SimpleDependency]:
        """Parse lockfile content and return only the top-level dependencies.

        If you need more than name, version and the dev/optional flags, use
        :meth:`parse` instead.
        """
        return project_dependencies(self.parse(content))

    @classmethod
    def supported_filenames(cls) -> list[str]:
        """Return supported filenames."""
        return ["package-lock.json", "npm-shrinkwrap.json"]


def parse(content: Union[str, bytes], config: Optional[LockfileConfig] = None) -> PackageLockJson:
    """Parse a package-lock.json document.

    Args:
        content: The lockfile text.
        config: Optional parser settings.

    Returns:
        The decoded lockfile.
    """
    return PackageLockParser(config).parse(content)


def parse_dependencies(
    content: Union[str, bytes], config: Optional[LockfileConfig] = None
) -> list[SimpleDependency]:
    """Parse a package-lock.json document into simple dependency records."""
    return PackageLockParser(config).parse_dependencies(content)


def parse_file(path: Union[str, Path], config: Optional[LockfileConfig] = None) -> PackageLockJson:
    """Read and parse a lockfile from disk."""
    return parse(Path(path).read_bytes(), config)
