"""
Compression of the staging directory into the final archive.
"""

import logging
from pathlib import Path

from .context import RunContext, Timer
from .errors import ArchivingError
from .runner import Runner
from .staging import StagingArea


class Archiver:
    """Builds a gzipped tarball of the staging directory with ``tar``."""

    def __init__(self, runner: Runner):
        self.runner = runner

    def archive(
        self,
        staging: StagingArea,
        output_file: str,
        context: RunContext
    ) -> tuple[Path, int]:
        """
        Archive ``staging`` next to it as ``output_file``.

        Paths inside the archive are relative to the output directory, so the
        archive unpacks into a single ``mysqldumps_<date>`` folder.

        Returns:
            The archive path and its size in bytes.

        Raises:
            ArchivingError: if tar fails or the archive cannot be inspected.
        """
        output_dir = staging.path.parent
        archive_path = output_dir / output_file
        timer = Timer()

        with timer.measure():
            result = self.runner.run(
                'tar', ['czf', output_file, staging.name], cwd=output_dir
            )
        if not result.ok:
            self._discard_partial(archive_path, context)
            raise ArchivingError(
                f"tar exited with status {result.returncode}: {result.stderr.strip()}"
            )
        logging.info(f"Tarballing all sql dumps... done in {timer.elapsed:.0f} second(s).")

        try:
            size = archive_path.stat().st_size
        except OSError as e:
            raise ArchivingError(f"Could not read size of {archive_path}: {e}") from e

        return archive_path, size

    def _discard_partial(self, archive_path: Path, context: RunContext) -> None:
        """Remove a half-written archive so the next run is not blocked by it."""
        if not archive_path.exists():
            return
        try:
            archive_path.unlink()
            logging.debug(f"Removed partial archive {archive_path}")
        except OSError as e:
            context.record_warning(f"Could not remove partial archive {archive_path}: {e}")
