"""Async subprocess helpers"""

import asyncio
import shutil
from dataclasses import dataclass
from typing import Callable, Optional, Sequence


@dataclass
class CommandResult:
    """Outcome of a finished (or abandoned) command"""

    stdout: str
    stderr: str
    exit_code: int
    timed_out: bool = False
    missing_executable: bool = False

    @property
    def output(self) -> str:
        """stdout and stderr combined; some tools write their tree to either"""
        return f"{self.stdout}\n{self.stderr}"


async def _kill(proc: asyncio.subprocess.Process):
    try:
        proc.kill()
    except ProcessLookupError:
        pass
    await proc.wait()


async def execute_command(
    args: Sequence[str],
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
) -> CommandResult:
    """
    Run a command and capture its output

    A non-zero exit code is reported in the result, never raised. A missing
    executable or an expired timeout are reported the same way.

    Args:
        args: Program and arguments (no shell)
        cwd: Working directory
        timeout: Seconds to wait before killing the process (None waits forever)

    Returns:
        CommandResult with trimmed stdout/stderr
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, PermissionError) as e:
        return CommandResult(stdout='', stderr=str(e), exit_code=127, missing_executable=True)

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill(proc)
        return CommandResult(
            stdout='', stderr=f"timed out after {timeout}s", exit_code=-1, timed_out=True)

    return CommandResult(
        stdout=stdout.decode('utf-8', errors='replace').strip(),
        stderr=stderr.decode('utf-8', errors='replace').strip(),
        exit_code=proc.returncode,
    )


async def execute_command_stream(
    args: Sequence[str],
    cwd: Optional[str] = None,
    on_stdout: Optional[Callable[[str], None]] = None,
    on_stderr: Optional[Callable[[str], None]] = None,
) -> int:
    """
    Run a command and hand each output line to a callback as it arrives

    Returns:
        The exit code

    Raises:
        FileNotFoundError: if the executable does not exist
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    async def pump(stream: asyncio.StreamReader, callback):
        while True:
            line = await stream.readline()
            if not line:
                break
            if callback:
                callback(line.decode('utf-8', errors='replace'))

    await asyncio.gather(pump(proc.stdout, on_stdout), pump(proc.stderr, on_stderr))
    return await proc.wait()


def command_exists(command: str) -> bool:
    """Check if a command is on PATH"""
    return shutil.which(command) is not None
