"""
Lifecycle of the temporary directory holding one run's artifacts.
"""

import logging
import os
import shutil
from datetime import date
from pathlib import Path
from typing import Optional

from .errors import CleanupError, CollisionError


DEFAULT_PREFIX = 'mysqldumps'


def staging_name(prefix: str = DEFAULT_PREFIX, day: Optional[date] = None) -> str:
    """Date-stamped directory name, e.g. ``mysqldumps_20240131``."""
    day = day or date.today()
    return f"{prefix}_{day.strftime('%Y%m%d')}"


class StagingArea:
    """Handle on a staging directory created by ``StagingArea.create``."""

    def __init__(self, path: Path):
        self.path = path
        self.disposed = False

    @classmethod
    def check_available(cls, output_dir: Path, dir_name: str) -> Path:
        """
        Raises:
            CollisionError: if a file, directory or link already uses the name.
        """
        path = Path(output_dir) / dir_name
        if os.path.lexists(path):
            raise CollisionError(
                "Output directory already contains a file/folder with the same name "
                f"as temporary folder required: {path}"
            )
        return path

    @classmethod
    def create(cls, output_dir: Path, dir_name: str) -> "StagingArea":
        """Create the staging directory; never reuses an existing one."""
        path = cls.check_available(output_dir, dir_name)
        try:
            path.mkdir()
        except FileExistsError as e:
            raise CollisionError(f"Temporary folder appeared concurrently: {path}") from e
        logging.info(f"Creating temporary folder: {dir_name}.")
        return cls(path)

    @property
    def name(self) -> str:
        return self.path.name

    def dispose(self) -> None:
        """
        Remove the directory tree.

        Raises:
            CleanupError: if anything could not be removed.
        """
        if self.disposed:
            return
        shutil.rmtree(self.path, ignore_errors=True)
        self.disposed = True
        if os.path.lexists(self.path):
            raise CleanupError(f"Could not fully remove {self.path}", path=str(self.path))
        logging.info("Deleting sql files... done.")
