"""Data models for malware scanning"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List


class PackageManager(str, Enum):
    """Package manager flavour, inferred once per project root"""

    NPM = 'npm'
    YARN_CLASSIC = 'yarn-classic'
    YARN_MODERN = 'yarn-modern'

    @property
    def is_yarn(self) -> bool:
        return self in (PackageManager.YARN_CLASSIC, PackageManager.YARN_MODERN)


@dataclass(frozen=True)
class PackageIdentifier:
    """A validated name@version string naming one known-malicious release"""

    raw: str        # Identifier as written in the configuration
    name: str       # Everything before the last '@' (may be scoped)
    version: str    # 1 to 3 dot-separated non-negative integers

    def __str__(self) -> str:
        return self.raw


# Source keys in check-cost order, with the labels used in reports
SOURCE_LABELS = {
    'manifest': 'package.json',
    'lockfile': 'lock file',
    'installed': 'node_modules',
    'dependency_tree': 'dependency tree',
}


@dataclass
class ScanRecord:
    """Per-identifier verdicts from the four evidence sources"""

    identifier: PackageIdentifier
    found_in_manifest: bool = False
    found_in_lockfile: bool = False
    found_in_installed_tree: bool = False
    found_in_dependency_tree: bool = False

    # Notes about sources that could not give a full answer (timeouts etc.)
    caveats: List[str] = field(default_factory=list)

    _FIELDS = {
        'manifest': 'found_in_manifest',
        'lockfile': 'found_in_lockfile',
        'installed': 'found_in_installed_tree',
        'dependency_tree': 'found_in_dependency_tree',
    }

    def set_result(self, source: str, found: bool):
        """Record the verdict of one source"""
        setattr(self, self._FIELDS[source], bool(found))

    def get_result(self, source: str) -> bool:
        return getattr(self, self._FIELDS[source])

    @property
    def is_positive(self) -> bool:
        """True when any source found the identifier"""
        return any(self.get_result(source) for source in SOURCE_LABELS)

    def sources(self) -> List[str]:
        """Labels of the sources that found the identifier, in check-cost order"""
        return [label for source, label in SOURCE_LABELS.items() if self.get_result(source)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        result = {
            'package': self.identifier.raw,
            'name': self.identifier.name,
            'version': self.identifier.version,
            'detected': self.is_positive,
            'package_json': self.found_in_manifest,
            'lock_file': self.found_in_lockfile,
            'node_modules': self.found_in_installed_tree,
            'dependency_tree': self.found_in_dependency_tree,
        }

        if self.caveats:
            result['caveats'] = list(self.caveats)

        return result
