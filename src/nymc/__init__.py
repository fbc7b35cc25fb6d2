"""
nymc - npm malware checker

Looks for known-malicious package versions in an npm or yarn project
"""

try:
    from importlib.metadata import version
    __version__ = version("nymc")
except Exception:
    # Fallback for development installs
    __version__ = "0.0.0-dev"

from . import core
from . import detectors

__all__ = ['core', 'detectors', '__version__']
