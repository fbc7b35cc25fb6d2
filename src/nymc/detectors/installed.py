"""Installed package (node_modules) detector"""

import json
from pathlib import Path

from nymc.core import PackageIdentifier
from .base import FileDetector, warn


class InstalledTreeDetector(FileDetector):
    """
    Compares the installed version in node_modules with the identifier

    Scoped names nest two levels (node_modules/@scope/name). Only an exact
    version match counts, since an installed package has one concrete version.
    """

    source = 'installed'

    def package_json_path(self, name: str) -> Path:
        return self.project_root.joinpath('node_modules', *name.split('/'), 'package.json')

    def check(self, identifier: PackageIdentifier) -> bool:
        path = self.package_json_path(identifier.name)
        if not path.is_file():
            return False

        try:
            with open(path, 'r', encoding='utf-8') as f:
                package_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            warn(f"Error checking {path}: {e}")
            return False

        if not isinstance(package_data, dict):
            return False

        return package_data.get('version') == identifier.version
