"""Base detector interfaces and the shared warning helper"""

from abc import ABC, abstractmethod
from pathlib import Path

import click

from nymc.core import PackageIdentifier, PackageManager, ScanRecord


def warn(message: str):
    """Print a non-fatal warning to stderr"""
    click.echo(click.style(f"⚠️  Warning: {message}", fg='yellow'), err=True)


class Detector(ABC):
    """
    Base class for one evidence source

    Each detector answers a single question for one identifier: does this
    source contain name@version? Detectors return a verdict and never stop
    the program; fatal conditions are raised as NymcError subclasses.

    `evaluate` is the one entry point shared by every detector; the
    scanner only ever calls that.
    """

    # Key of the ScanRecord flag this detector fills in
    source: str = ''

    def __init__(self, project_root: Path, package_manager: PackageManager = PackageManager.NPM):
        """
        Initialize detector

        Args:
            project_root: Root directory of the project being scanned
            package_manager: Package manager detected for that root
        """
        self.project_root = Path(project_root)
        self.package_manager = PackageManager(package_manager)

    @abstractmethod
    async def evaluate(self, identifier: PackageIdentifier, record: ScanRecord):
        """Check the source and store the verdict on the record"""
        pass


class FileDetector(Detector):
    """Detector whose answer comes from reading files, without suspending"""

    @abstractmethod
    def check(self, identifier: PackageIdentifier) -> bool:
        """
        Check whether this source contains the identifier

        Returns:
            True if found, False otherwise
        """
        pass

    async def evaluate(self, identifier: PackageIdentifier, record: ScanRecord):
        record.set_result(self.source, self.check(identifier))
