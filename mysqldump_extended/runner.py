"""
External command execution for mysqldump-extended.

Every call to ``mysql``, ``mysqldump`` and ``tar`` goes through a
``CommandRunner`` so the pipeline can be exercised with a fake in tests.
"""

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from .errors import PreconditionError


DEFAULT_EXECUTABLES = {
    'mysql': 'mysql',
    'mysqldump': 'mysqldump',
    'tar': 'tar',
}

PASSWORD_PATTERN = re.compile(r'^(--password=).+$')


@dataclass
class CommandResult:
    """Exit status and captured output of one command."""
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Runner(Protocol):
    def run(
        self,
        command: str,
        args: list[str],
        stdin: Optional[str] = None,
        stdout_path: Optional[Path] = None,
        cwd: Optional[Path] = None
    ) -> CommandResult:
        ...


def mask_arguments(argv: list[str]) -> list[str]:
    """Hide the password value before an argument list is logged."""
    return [PASSWORD_PATTERN.sub(r'\1***', arg) for arg in argv]


def resolve_executables(
    configured: dict[str, str],
    required: Optional[list[str]] = None
) -> dict[str, str]:
    """
    Resolve logical command names to absolute executable paths.

    Args:
        configured: Overrides from the config file, name or path per command.
        required: Commands to resolve; all known commands when omitted.

    Raises:
        PreconditionError: if an executable cannot be found.
    """
    names = {**DEFAULT_EXECUTABLES, **{k: v for k, v in configured.items() if v}}
    resolved = {}
    for command in required or list(names):
        name = names.get(command, command)
        path = shutil.which(name)
        if path is None:
            raise PreconditionError(f"Executable for '{command}' not found: {name}")
        resolved[command] = path
    return resolved


class CommandRunner:
    """Runs external tools synchronously, one at a time."""

    def __init__(self, executables: dict[str, str]):
        self.executables = executables

    def run(
        self,
        command: str,
        args: list[str],
        stdin: Optional[str] = None,
        stdout_path: Optional[Path] = None,
        cwd: Optional[Path] = None
    ) -> CommandResult:
        """
        Run ``command`` with ``args`` and wait for it to exit.

        Args:
            command: Logical name ('mysql', 'mysqldump', 'tar').
            args: Arguments passed after the executable.
            stdin: Optional text fed to the process.
            stdout_path: If given, stdout is streamed into this file, which
                must not exist yet. ``CommandResult.stdout`` is then empty.
            cwd: Working directory for the process.
        """
        argv = [self.executables.get(command, command), *args]
        logging.debug(f"Running: {' '.join(mask_arguments(argv))}")

        try:
            if stdout_path is not None:
                with open(stdout_path, 'xb') as out:
                    proc = subprocess.run(
                        argv, input=stdin, stdout=out, stderr=subprocess.PIPE,
                        cwd=cwd, text=True
                    )
                return CommandResult(proc.returncode, "", proc.stderr or "")

            proc = subprocess.run(
                argv, input=stdin, capture_output=True, cwd=cwd, text=True
            )
        except OSError as e:
            logging.error(f"Failed to run '{command}': {e}")
            return CommandResult(127, "", str(e))

        return CommandResult(proc.returncode, proc.stdout or "", proc.stderr or "")
