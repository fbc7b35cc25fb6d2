"""Project root discovery and package manager detection"""

from pathlib import Path
from typing import Optional, Union

from nymc.core import PackageManager


def _walk_up(start_dir: Path, marker: str) -> Optional[Path]:
    current = Path(start_dir).absolute()
    # The filesystem root itself is never considered a project
    while current != Path(current.anchor):
        if (current / marker).exists():
            return current
        current = current.parent
    return None


def find_project_root(start_dir: Union[str, Path, None] = None) -> Path:
    """
    Find the nearest directory containing package.json

    Args:
        start_dir: Directory to start from (default: current working directory)

    Returns:
        The project root, or start_dir itself when no package.json is found
    """
    start = Path(start_dir) if start_dir else Path.cwd()
    return _walk_up(start, 'package.json') or start.absolute()


def find_git_root(start_dir: Union[str, Path, None] = None) -> Optional[Path]:
    """Find the nearest directory containing .git, or None"""
    start = Path(start_dir) if start_dir else Path.cwd()
    return _walk_up(start, '.git')


def detect_package_manager(project_root: Union[str, Path]) -> PackageManager:
    """
    Infer the package manager from the files in the project root

    yarn.lock means yarn; with a .yarnrc.yml next to it the project is on
    yarn 2+ (modern). Anything else is treated as npm.
    """
    root = Path(project_root)

    if (root / 'yarn.lock').exists():
        if (root / '.yarnrc.yml').exists():
            return PackageManager.YARN_MODERN
        return PackageManager.YARN_CLASSIC

    return PackageManager.NPM
