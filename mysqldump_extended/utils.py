"""
Utility functions for mysqldump-extended.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .models import RunResult


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration."""
    log_level = getattr(logging, log_settings.get('level', 'WARNING').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def format_summary(result: RunResult) -> list[str]:
    """Summary lines for a finished run."""
    lines = [f"Databases: {result.target_count}"]
    for db in result.databases:
        status = "ok" if db.success else f"{len(db.errors)} error(s)"
        lines.append(f"  - {db.name}: {db.elapsed:.0f} second(s), {status}")

    if result.privileges is not None:
        lines.append(f"Privileges: {result.privileges.path.name}")

    if result.archived:
        lines.append(f"Final dump file: {result.archive_path} ({result.archive_size} bytes)")
    elif result.staging_dir is not None:
        lines.append(f"Not archived; dump files kept in {result.staging_dir}")

    return lines


def log_summary(result: RunResult) -> None:
    """Log the summary; errors and warnings are always shown."""
    logging.info("=" * 50)
    logging.info("BACKUP COMPLETE")
    for line in format_summary(result):
        logging.info(line)

    if result.warnings:
        logging.warning(f"Warnings: {len(result.warnings)}")
        for warning in result.warnings:
            logging.warning(f"  - {warning}")

    if result.errors:
        logging.warning(f"Errors: {len(result.errors)}")
        for err in result.errors:
            logging.warning(f"  - {err['type']}: {err['error']}")
