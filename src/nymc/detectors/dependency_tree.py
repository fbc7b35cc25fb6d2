"""Dependency tree detector, backed by the package manager's own listing command"""

from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Tuple

from nymc.command import CommandResult, execute_command
from nymc.core import PackageIdentifier, PackageManager, ScanRecord
from .base import Detector, warn


DEFAULT_TIMEOUT = 60.0

Runner = Callable[..., Awaitable[CommandResult]]


class DependencyTreeDetector(Detector):
    """
    Looks for name@version in the full resolved dependency tree

    Runs `npm ls`, `yarn list` or `yarn info` and searches stdout plus stderr
    for the literal token. A non-zero exit code is normal here (the listing
    commands fail for names they do not know) and only means "not found".
    """

    source = 'dependency_tree'

    def __init__(self, project_root: Path, package_manager: PackageManager = PackageManager.NPM,
                 timeout: Optional[float] = DEFAULT_TIMEOUT, runner: Optional[Runner] = None):
        """
        Args:
            timeout: Seconds before the listing command is killed (None: no limit)
            runner: Coroutine function with the signature of execute_command
                (default: execute_command)
        """
        super().__init__(project_root, package_manager)
        self.timeout = timeout
        self.runner = runner or execute_command

    def build_command(self, name: str) -> List[str]:
        """Listing command for the detected package manager, scoped to name"""
        if self.package_manager == PackageManager.YARN_CLASSIC:
            return ['yarn', 'list', '--pattern', name, '--depth=Infinity']
        if self.package_manager == PackageManager.YARN_MODERN:
            return ['yarn', 'info', name, '--all', '--recursive']
        return ['npm', 'ls', name, '--prefix', str(self.project_root), '--all']

    async def inspect(self, identifier: PackageIdentifier) -> Tuple[bool, Optional[str]]:
        """
        Run the listing command

        Returns:
            Tuple of (found, caveat); caveat explains a verdict that could not
            be fully established (timeout, missing executable)
        """
        command = self.build_command(identifier.name)
        result = await self.runner(command, cwd=str(self.project_root), timeout=self.timeout)

        if result.timed_out:
            caveat = f"dependency tree check timed out after {self.timeout}s ({' '.join(command)})"
            warn(f"{identifier}: {caveat}")
            return False, caveat

        if result.missing_executable:
            caveat = f"dependency tree not checked, {command[0]} is not installed"
            warn(f"{identifier}: {caveat}")
            return False, caveat

        token = f"{identifier.name}@{identifier.version}"
        return token in result.output, None

    async def check_async(self, identifier: PackageIdentifier) -> bool:
        found, _ = await self.inspect(identifier)
        return found

    async def evaluate(self, identifier: PackageIdentifier, record: ScanRecord):
        found, caveat = await self.inspect(identifier)
        record.set_result(self.source, found)
        if caveat:
            record.caveats.append(caveat)
