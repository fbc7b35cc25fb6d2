"""Exceptions raised by the scanner

Components raise these and never exit the process themselves; the CLI is the
only place that turns them into a diagnostic and a non-zero exit status.
"""

from typing import Optional


class NymcError(RuntimeError):
    """Base class for every fatal scanner error."""


class ConfigurationError(NymcError):
    """Raised when the config file or the project manifest is missing or unreadable."""


class ManifestNotFoundError(ConfigurationError):
    """Raised when the project has no package.json."""

    def __init__(self, path: str):
        super().__init__(f"package.json not found: {path}")
        self.path = path


class InvalidPackageError(NymcError):
    """Raised when a configured identifier is not of the form name@version."""

    def __init__(self, package, message: Optional[str] = None):
        if message is None:
            message = (
                f'Invalid package format: "{package}". '
                f'Expected format: "package_name@version"'
            )
        super().__init__(message)
        self.package = package


class RemoteFeedError(NymcError):
    """Raised when the remote package list cannot be fetched or parsed."""
