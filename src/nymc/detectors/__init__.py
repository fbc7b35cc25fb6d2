"""Evidence-source detectors"""

from pathlib import Path
from typing import List, Optional

from nymc.core import PackageManager
from .base import Detector, FileDetector
from .manifest import ManifestDetector
from .lockfile import LockfileDetector
from .installed import InstalledTreeDetector
from .dependency_tree import DependencyTreeDetector, DEFAULT_TIMEOUT

__all__ = [
    'Detector',
    'FileDetector',
    'ManifestDetector',
    'LockfileDetector',
    'InstalledTreeDetector',
    'DependencyTreeDetector',
]

# Registry of evidence sources, cheap file reads before the subprocess call
DETECTOR_REGISTRY = {
    'manifest': ManifestDetector,
    'lockfile': LockfileDetector,
    'installed': InstalledTreeDetector,
    'dependency_tree': DependencyTreeDetector,
}


def build_detectors(project_root: Path, package_manager: PackageManager,
                    timeout: Optional[float] = DEFAULT_TIMEOUT,
                    semver_ranges: bool = False,
                    runner=None) -> List[Detector]:
    """Instantiate one detector per registered source, in registry order"""
    options = {
        'manifest': {'semver_ranges': semver_ranges},
        'dependency_tree': {'timeout': timeout},
    }
    if runner is not None:
        options['dependency_tree']['runner'] = runner

    return [
        detector_class(project_root, package_manager, **options.get(source, {}))
        for source, detector_class in DETECTOR_REGISTRY.items()
    ]
