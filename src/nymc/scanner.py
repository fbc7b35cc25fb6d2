"""Scan orchestration: runs every detector for every identifier"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import click

from nymc.core import PackageIdentifier, PackageManager, ScanRecord
from nymc.detectors import Detector, build_detectors
from nymc.detectors.dependency_tree import DEFAULT_TIMEOUT


class ScanProgress:
    """
    Identifier counter printed while a scan runs

    On a terminal a single "[i/N] name@version" line is rewritten in place.
    When output is piped, one line per finished identifier is printed instead.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.is_tty = sys.stdout.isatty()
        self.total = 0
        self.done = 0
        self._width = 0

    def start(self, total: int):
        self.total = total
        self.done = 0

    def advance(self, identifier: PackageIdentifier):
        """Count one more identifier as checked"""
        self.done += 1
        if not self.enabled:
            return

        text = f"[{self.done}/{self.total}] {identifier}"
        if not self.is_tty:
            click.echo(f"  {text}")
            return

        # Pad over whatever the previous, possibly longer, identifier left behind
        padding = " " * max(self._width - len(text), 0)
        self._width = len(text)
        click.echo(f"\r{click.style(text, dim=True)}{padding}", nl=False)

    def finish(self):
        """Erase the in-place line"""
        if self.is_tty and self._width:
            click.echo("\r" + " " * self._width + "\r", nl=False)
            self._width = 0


class Scanner:
    """
    Checks a list of identifiers against all four evidence sources

    Every detector runs exactly once per identifier, whatever the earlier
    detectors found. A fatal detector error (e.g. missing package.json)
    propagates and aborts the whole scan.
    """

    def __init__(
        self,
        project_root: Path,
        package_manager: PackageManager = PackageManager.NPM,
        detectors: Optional[List[Detector]] = None,
        parallel: bool = False,
        progress: Optional[ScanProgress] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        semver_ranges: bool = False,
    ):
        """
        Initialize scanner

        Args:
            project_root: Project root directory
            package_manager: Package manager detected for the root
            detectors: Detectors to run (default: one per registered source)
            parallel: Check identifiers concurrently; results keep input order
            progress: Optional identifier counter
            timeout: Dependency tree command timeout in seconds
            semver_ranges: Enable npm range matching in the manifest detector
        """
        self.project_root = Path(project_root)
        self.package_manager = PackageManager(package_manager)
        if detectors is None:
            detectors = build_detectors(
                self.project_root, self.package_manager,
                timeout=timeout, semver_ranges=semver_ranges)
        self.detectors = detectors
        self.parallel = parallel
        self.progress = progress or ScanProgress(enabled=False)

    async def scan_identifier(self, identifier: PackageIdentifier) -> ScanRecord:
        """Run every detector for one identifier"""
        record = ScanRecord(identifier=identifier)
        for detector in self.detectors:
            await detector.evaluate(identifier, record)
        self.progress.advance(identifier)
        return record

    async def scan(self, identifiers: Sequence[PackageIdentifier]) -> List[ScanRecord]:
        """
        Scan all identifiers

        Returns:
            One ScanRecord per identifier, in input order
        """
        self.progress.start(len(identifiers))
        try:
            if self.parallel:
                records = await asyncio.gather(*(self.scan_identifier(i) for i in identifiers))
                return list(records)
            return [await self.scan_identifier(identifier) for identifier in identifiers]
        finally:
            self.progress.finish()

    def run(self, identifiers: Sequence[PackageIdentifier]) -> List[ScanRecord]:
        """Synchronous entry point for scan()"""
        return asyncio.run(self.scan(identifiers))
