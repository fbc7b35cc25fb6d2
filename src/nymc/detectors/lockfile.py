"""Lock file detector"""

from pathlib import Path

from nymc.core import PackageIdentifier
from .base import FileDetector, warn


class LockfileDetector(FileDetector):
    """
    Searches the raw lock file text for the identifier

    The lock file is not parsed. Either of two textual shapes counts as a hit:
    - "name": "version"   (package-lock.json)
    - name@version        (yarn.lock entries and resolutions)

    A missing lock file is a plain "not found".
    """

    source = 'lockfile'

    @property
    def lockfile_name(self) -> str:
        return 'yarn.lock' if self.package_manager.is_yarn else 'package-lock.json'

    @property
    def lockfile_path(self) -> Path:
        return self.project_root / self.lockfile_name

    def check(self, identifier: PackageIdentifier) -> bool:
        path = self.lockfile_path
        if not path.is_file():
            return False

        try:
            content = path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            warn(f"Error reading {path}: {e}")
            return False

        quoted = f'"{identifier.name}": "{identifier.version}"'
        token = f'{identifier.name}@{identifier.version}'
        return quoted in content or token in content
