"""
Exceptions raised by the backup pipeline.

Precondition failures happen before any side effect and map to exit status 1.
Everything else is a runtime failure.
"""

from typing import Optional


class BackupError(Exception):
    """Base exception for all backup errors."""
    pass


class PreconditionError(BackupError):
    """Raised when a run cannot start (bad options, unusable output directory)."""
    pass


class CollisionError(PreconditionError):
    """Raised when the staging directory name is already taken."""
    pass


class QueryError(BackupError):
    """Raised when an administrative query fails."""
    pass


class EnumerationError(BackupError):
    """Raised when the list of databases cannot be retrieved."""
    pass


class DumpError(BackupError):
    """Raised when one dump profile fails for one database."""

    def __init__(self, database: str, kind: str, message: str):
        self.database = database
        self.kind = kind
        super().__init__(f"{database}/{kind}: {message}")


class PrivilegeExtractionError(BackupError):
    """Raised when grants cannot be extracted."""
    pass


class ArchivingError(BackupError):
    """Raised when the archive cannot be built or inspected."""
    pass


class CleanupError(BackupError):
    """Raised when a file or directory cannot be removed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)
