"""Core components for malware scanning"""

from .errors import (
    NymcError,
    ConfigurationError,
    ManifestNotFoundError,
    InvalidPackageError,
    RemoteFeedError,
)
from .models import PackageIdentifier, PackageManager, ScanRecord
from .identifier import parse_identifier, split_identifier, validate_packages
from .config import ScanConfiguration
from .report_engine import ReportEngine

__all__ = [
    'NymcError',
    'ConfigurationError',
    'ManifestNotFoundError',
    'InvalidPackageError',
    'RemoteFeedError',
    'PackageIdentifier',
    'PackageManager',
    'ScanRecord',
    'ScanConfiguration',
    'ReportEngine',
    'parse_identifier',
    'split_identifier',
    'validate_packages',
]
