"""
Shared fixtures: a fake command runner standing in for mysql, mysqldump and tar.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pytest

from mysqldump_extended.database_dumper import DUMP_PROFILES
from mysqldump_extended.models import ConnectionProfile
from mysqldump_extended.runner import CommandResult


GRANTS_OUTPUT = (
    "Grants for app@%\n"
    "GRANT USAGE ON *.* TO 'app'@'%'\n"
    "GRANT SELECT, INSERT ON `app`.* TO 'app'@'%'\n"
    "Grants for root@localhost\n"
    "GRANT ALL PRIVILEGES ON *.* TO 'root'@'localhost' WITH GRANT OPTION\n"
)


@dataclass
class Call:
    command: str
    args: list[str]
    stdin: Optional[str] = None
    stdout_path: Optional[Path] = None
    cwd: Optional[Path] = None


def profile_kind(args: list[str]) -> Optional[str]:
    """Identify which dump profile produced an argument list."""
    for dump_profile in DUMP_PROFILES:
        options = list(dump_profile.options)
        if args[-2 - len(options):-2] == options:
            return dump_profile.kind.value
    return None


class FakeCommandRunner:
    """Records calls and answers them like a small MySQL server would."""

    def __init__(
        self,
        databases: Optional[list[str]] = None,
        principals: Optional[list[str]] = None,
        grants_output: str = GRANTS_OUTPUT
    ):
        self.databases = ['information_schema', 'app', 'test', 'mysql'] if databases is None else databases
        self.principals = ["'app'@'%'", "'root'@'localhost'"] if principals is None else principals
        self.grants_output = grants_output
        self.failing_dumps: set[tuple[str, str]] = set()
        self.failing_commands: dict[str, int] = {}
        self.calls: list[Call] = []

    def fail_dump(self, database: str, kind: str) -> None:
        self.failing_dumps.add((database, kind))

    def fail(self, command: str, returncode: int = 1) -> None:
        self.failing_commands[command] = returncode

    def calls_for(self, command: str) -> list[Call]:
        return [call for call in self.calls if call.command == command]

    def run(self, command, args, stdin=None, stdout_path=None, cwd=None):
        self.calls.append(Call(command, list(args), stdin, stdout_path, cwd))
        result = self._respond(command, list(args), stdin, cwd)
        if stdout_path is not None:
            with open(stdout_path, 'x', encoding='utf-8') as f:
                f.write(result.stdout)
            return CommandResult(result.returncode, "", result.stderr)
        return result

    def _respond(self, command, args, stdin, cwd) -> CommandResult:
        if command in self.failing_commands:
            return CommandResult(self.failing_commands[command], "", f"{command} failed")

        if command == 'mysql':
            if stdin is not None:
                return CommandResult(0, self.grants_output)
            sql = args[args.index('--execute') + 1]
            if sql.startswith('SHOW DATABASES'):
                return CommandResult(0, ''.join(f"{db}\n" for db in self.databases))
            return CommandResult(0, ''.join(f"SHOW GRANTS FOR {p};\n" for p in self.principals))

        if command == 'mysqldump':
            database = args[-1]
            kind = profile_kind(args)
            if (database, kind) in self.failing_dumps:
                return CommandResult(2, "-- partial\n", f"mysqldump: Got error while dumping {kind}")
            return CommandResult(0, f"-- {kind} of {database}\n")

        if command == 'tar':
            Path(cwd, args[1]).write_bytes(b'\x1f\x8b' + b'0' * 62)
            return CommandResult(0)

        return CommandResult(127, "", f"unknown command {command}")


@pytest.fixture
def fake_runner():
    return FakeCommandRunner()


@pytest.fixture
def profile():
    return ConnectionProfile(host="db.local", user="backup", password="secret", charset="utf8")
