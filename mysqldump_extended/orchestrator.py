"""
Main backup orchestration for mysqldump-extended.
"""

import logging
import os
from typing import Optional

from .archiver import Archiver
from .config import BackupSettings
from .context import RunContext
from .database_dumper import DatabaseDumper
from .enumerator import TargetEnumerator
from .errors import BackupError, CleanupError, DumpError, PreconditionError
from .models import RunResult, RunState
from .privileges import PrivilegeExtractor
from .query import QueryInterface, create_query_interface
from .runner import Runner
from .staging import StagingArea, staging_name


class BackupRunner:
    """
    Drives one backup run through its states:

    VALIDATING -> CLEANING -> STAGING -> DUMPING -> EXTRACTING_PRIVILEGES
    -> ARCHIVING -> CLEANUP -> DONE, or FAILED from any of them.

    Targets are listed during VALIDATING, so a server that cannot be
    queried fails the run before old archives are deleted or the staging
    directory is created.
    """

    def __init__(
        self,
        settings: BackupSettings,
        runner: Runner,
        query: Optional[QueryInterface] = None,
        dir_name: Optional[str] = None
    ):
        self.settings = settings
        self.runner = runner
        self.query = query or create_query_interface(
            settings.query_backend, runner, settings.connection
        )
        self.dir_name = dir_name or staging_name(settings.staging_prefix)
        self.context = RunContext(error_policy=settings.error_policy)
        self.result = RunResult()
        self.staging: Optional[StagingArea] = None

    @property
    def state(self) -> RunState:
        return self.result.state

    def _enter(self, state: RunState) -> None:
        logging.debug(f"State: {self.result.state.value} -> {state.value}")
        self.result.state = state

    def run(self) -> RunResult:
        """
        Run the backup.

        Raises:
            PreconditionError: before any side effect.
            EnumerationError: before any side effect.
            BackupError: on a fatal runtime failure; the staging directory,
                if created, is left in place.
        """
        logging.info("START")
        try:
            self._enter(RunState.VALIDATING)
            self.validate()
            targets = self.enumerate_targets()

            if self.settings.delete_previous:
                self._enter(RunState.CLEANING)
                self.delete_previous_archives()
            else:
                logging.info("NOT deleting any old backups...")

            self._enter(RunState.STAGING)
            self.staging = StagingArea.create(self.settings.output_dir, self.dir_name)
            self.result.staging_dir = self.staging.path

            self._enter(RunState.DUMPING)
            self.dump_databases(targets)

            self._enter(RunState.EXTRACTING_PRIVILEGES)
            extractor = PrivilegeExtractor(self.query)
            self.result.privileges = extractor.extract_to(self.staging.path, self.context)
            logging.info("Dump process completed.")

            if self.settings.archive:
                self._enter(RunState.ARCHIVING)
                if self.archive():
                    self._enter(RunState.CLEANUP)
                    self.cleanup()
            else:
                logging.info("Skipping tarballing sql dumps")
        except BackupError as e:
            self._enter(RunState.FAILED)
            self._collect()
            if not isinstance(e, PreconditionError):
                logging.error(f"Backup failed: {e}")
            raise

        self._enter(RunState.DONE)
        self._collect()
        logging.info("END.")
        return self.result

    def _collect(self) -> None:
        self.result.errors = list(self.context.errors)
        self.result.warnings = list(self.context.warnings)

    def validate(self) -> None:
        """Check every precondition, in order, without touching the filesystem."""
        settings = self.settings
        output_dir = settings.output_dir

        if not output_dir.is_dir():
            raise PreconditionError("Specified output is not a directory")
        if not os.access(output_dir, os.W_OK):
            raise PreconditionError("Output directory is not writable")
        if os.path.lexists(output_dir / settings.output_file):
            raise PreconditionError("Specified output file already exists")
        if not settings.connection.password:
            raise PreconditionError("MySQL password not provided or empty")
        StagingArea.check_available(output_dir, self.dir_name)

    def delete_previous_archives(self) -> None:
        """Delete earlier archives matching the configured pattern. Best effort."""
        logging.info("Deleting any old backups...")
        for path in sorted(self.settings.output_dir.glob(self.settings.previous_pattern)):
            if not path.is_file():
                continue
            try:
                path.unlink()
                logging.info(f"removed '{path}'")
            except OSError as e:
                self.context.record_warning(f"Could not delete old backup {path}: {e}")

    def enumerate_targets(self) -> list[str]:
        enumerator = TargetEnumerator(self.query, self.settings.exclusions)
        logging.info("Retrieving list of all databases...")
        return enumerator.enumerate(self.context)

    def dump_databases(self, targets: list[str]) -> None:
        logging.info("Beginning dump process...")
        dumper = DatabaseDumper(self.runner, self.settings.connection)
        for database in targets:
            try:
                db_result = dumper.dump_database(database, self.staging.path, self.context)
            except DumpError as e:
                self.context.record_error(e, database=e.database, kind=e.kind)
                raise
            self.result.databases.append(db_result)

    def archive(self) -> bool:
        """Build the archive; on failure keep the staging directory and report."""
        archiver = Archiver(self.runner)
        try:
            path, size = archiver.archive(self.staging, self.settings.output_file, self.context)
        except BackupError as e:
            self.context.record_error(e)
            logging.warning(f"Dump files left in {self.staging.path} for manual recovery")
            return False
        self.result.archive_path = path
        self.result.archive_size = size
        return True

    def cleanup(self) -> None:
        try:
            self.staging.dispose()
        except CleanupError as e:
            self.context.record_warning(str(e))
