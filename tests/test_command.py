"""Tests for the subprocess helpers (these run real processes)."""

import asyncio
import sys

from nymc.command import command_exists, execute_command, execute_command_stream


PYTHON = sys.executable


def test_execute_command_success():
    result = asyncio.run(execute_command([PYTHON, '-c', 'print("hello")']))

    assert result.stdout == 'hello'
    assert result.stderr == ''
    assert result.exit_code == 0
    assert not result.timed_out


def test_execute_command_non_zero_exit_is_returned():
    result = asyncio.run(execute_command(
        [PYTHON, '-c', 'import sys; print("someout"); sys.stderr.write("myerror"); sys.exit(2)']))

    assert result.stdout == 'someout'
    assert result.stderr == 'myerror'
    assert result.exit_code == 2
    assert 'someout' in result.output and 'myerror' in result.output


def test_execute_command_timeout():
    result = asyncio.run(execute_command(
        [PYTHON, '-c', 'import time; time.sleep(10)'], timeout=0.2))

    assert result.timed_out
    assert result.stdout == ''


def test_execute_command_missing_executable():
    result = asyncio.run(execute_command(['definitely-not-a-real-cmd-xyz123']))

    assert result.missing_executable
    assert result.exit_code == 127


def test_execute_command_stream():
    lines = []
    errors = []
    exit_code = asyncio.run(execute_command_stream(
        [PYTHON, '-c', 'import sys; print("a"); print("b"); sys.stderr.write("e\\n"); sys.exit(3)'],
        on_stdout=lines.append,
        on_stderr=errors.append,
    ))

    assert exit_code == 3
    assert [line.strip() for line in lines] == ['a', 'b']
    assert [line.strip() for line in errors] == ['e']


def test_command_exists():
    assert command_exists(PYTHON)
    assert not command_exists('definitely-not-a-real-cmd-xyz123')
