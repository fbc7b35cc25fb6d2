"""Manifest (package.json) detector"""

import json
import re
from pathlib import Path
from typing import Dict, List

from semantic_version import NpmSpec, Version

from nymc.core import (
    ConfigurationError,
    ManifestNotFoundError,
    PackageIdentifier,
    PackageManager,
)
from .base import FileDetector


DEPENDENCY_GROUPS = ('dependencies', 'devDependencies')

_NON_VERSION_CHARS = re.compile(r'[^0-9.]')


class ManifestDetector(FileDetector):
    """
    Checks the versions declared in package.json

    A declared version matches when, with every character other than digits
    and dots removed, it starts with the identifier's version. "^1.0.0"
    therefore matches 1.0.0, and a configured "1.0" matches "1.0.3".
    """

    source = 'manifest'

    def __init__(self, project_root: Path, package_manager: PackageManager = PackageManager.NPM,
                 semver_ranges: bool = False):
        """
        Args:
            semver_ranges: Also match when the identifier's version lies inside
                the declared npm range (e.g. "^1.0.0" against 1.4.0)
        """
        super().__init__(project_root, package_manager)
        self.semver_ranges = semver_ranges

    @property
    def manifest_path(self) -> Path:
        return self.project_root / 'package.json'

    def _load_manifest(self) -> dict:
        path = self.manifest_path
        if not path.is_file():
            raise ManifestNotFoundError(str(path))

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid package.json: {path}")
        return data

    def declared_versions(self, name: str) -> List[str]:
        """Every version declared for name across both dependency groups"""
        data = self._load_manifest()
        declared = []
        for group in DEPENDENCY_GROUPS:
            deps: Dict[str, str] = data.get(group) or {}
            if isinstance(deps, dict) and name in deps:
                declared.append(str(deps[name]))
        return declared

    def _in_range(self, declared: str, version: str) -> bool:
        try:
            return Version.coerce(version) in NpmSpec(declared)
        except ValueError:
            return False

    def matches(self, declared: str, version: str) -> bool:
        """Check a single declared version against the identifier's version"""
        if _NON_VERSION_CHARS.sub('', declared).startswith(version):
            return True
        return self.semver_ranges and self._in_range(declared, version)

    def check(self, identifier: PackageIdentifier) -> bool:
        return any(self.matches(declared, identifier.version)
                   for declared in self.declared_versions(identifier.name))
