"""
Per-database dump decomposition for mysqldump-extended.

Each database is written as five files so a restore can load structure,
then data, then triggers, events and routines, and so each slice can be
restored on its own.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .context import RunContext, Timer
from .errors import DumpError
from .models import ConnectionProfile, DatabaseResult, DumpArtifact, DumpKind
from .runner import Runner


@dataclass(frozen=True)
class DumpProfile:
    """mysqldump options selecting one object kind."""
    kind: DumpKind
    options: tuple[str, ...]

    def arguments(self, profile: ConnectionProfile, database: str) -> list[str]:
        return profile.client_options() + list(self.options) + ['--databases', database]


# Execution order matters: triggers, events and routines are recreated
# after the data load so they do not fire during it.
DUMP_PROFILES = (
    DumpProfile(DumpKind.STRUCTURE, (
        '--no-data',
        '--opt',
        '--set-charset',
        '--skip-triggers',
    )),
    DumpProfile(DumpKind.DATA, (
        '--force',
        '--hex-blob',
        '--no-create-db',
        '--no-create-info',
        '--opt',
        '--skip-triggers',
    )),
    DumpProfile(DumpKind.TRIGGERS, (
        '--no-create-db',
        '--no-create-info',
        '--no-data',
        '--skip-opt', '--create-options',
        '--triggers',
    )),
    DumpProfile(DumpKind.EVENTS, (
        '--events',
        '--no-create-db',
        '--no-create-info',
        '--no-data',
        '--skip-opt', '--create-options',
        '--skip-triggers',
    )),
    DumpProfile(DumpKind.ROUTINES, (
        '--no-create-db',
        '--no-create-info',
        '--no-data',
        '--routines',
        '--skip-opt', '--create-options',
        '--skip-triggers',
    )),
)


class DatabaseDumper:
    """Runs the five dump profiles for one database."""

    def __init__(self, runner: Runner, profile: ConnectionProfile):
        self.runner = runner
        self.profile = profile

    def dump_profile(
        self,
        database: str,
        dump_profile: DumpProfile,
        staging_dir: Path
    ) -> DumpArtifact:
        """
        Dump one kind-slice of ``database`` into its own file.

        Raises:
            DumpError: if mysqldump exits with a nonzero status.
        """
        path = staging_dir / dump_profile.kind.file_name(database)
        result = self.runner.run(
            'mysqldump',
            dump_profile.arguments(self.profile, database),
            stdout_path=path
        )
        if not result.ok:
            message = result.stderr.strip() or f"exit status {result.returncode}"
            raise DumpError(database, dump_profile.kind.value, message)
        return DumpArtifact(target=database, kind=dump_profile.kind, path=path)

    def dump_database(
        self,
        database: str,
        staging_dir: Path,
        context: RunContext
    ) -> DatabaseResult:
        """
        Dump all profiles of ``database`` in order.

        A failing profile is recorded and the remaining profiles still run,
        unless the context asks to abort on the first error.
        """
        result = DatabaseResult(name=database)
        timer = Timer()

        with timer.measure():
            for dump_profile in DUMP_PROFILES:
                try:
                    result.artifacts.append(
                        self.dump_profile(database, dump_profile, staging_dir)
                    )
                except DumpError as e:
                    result.errors.append(str(e))
                    if context.abort_on_error:
                        raise
                    context.record_error(e, database=database, kind=dump_profile.kind.value)

        result.elapsed = timer.elapsed
        status = "done" if result.success else f"{len(result.errors)} error(s)"
        logging.info(f"- dumping '{database}'... {status} in {result.elapsed:.0f} second(s);")
        return result
