"""
mysqldump-extended
==================
Backs up every database on a MySQL server into separate files:
- Structure, data, triggers, events and routines per database
- All user privileges as one replayable script
- Packed into a single tar.gz archive, replacing the previous one
"""

from .archiver import Archiver
from .config import BackupSettings, ConfigLoader
from .connection import DatabaseConnection
from .context import RunContext
from .database_dumper import DUMP_PROFILES, DatabaseDumper, DumpProfile
from .enumerator import DEFAULT_EXCLUSIONS, TargetEnumerator
from .errors import (
    ArchivingError,
    BackupError,
    CleanupError,
    CollisionError,
    DumpError,
    EnumerationError,
    PreconditionError,
    PrivilegeExtractionError,
    QueryError,
)
from .main import main
from .models import (
    ConnectionProfile,
    DatabaseResult,
    DumpArtifact,
    DumpKind,
    ErrorPolicy,
    QueryBackend,
    RunResult,
    RunState,
)
from .orchestrator import BackupRunner
from .privileges import GrantBlock, PrivilegeExtractor, format_grants, parse_grants, reformat_grants
from .query import ClientQueryInterface, ConnectorQueryInterface
from .runner import CommandResult, CommandRunner, resolve_executables
from .staging import StagingArea, staging_name
from .utils import format_summary, log_summary, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "Archiver",
    "BackupRunner",
    "ClientQueryInterface",
    "CommandRunner",
    "ConfigLoader",
    "ConnectorQueryInterface",
    "DatabaseConnection",
    "DatabaseDumper",
    "PrivilegeExtractor",
    "StagingArea",
    "TargetEnumerator",
    # Models
    "BackupSettings",
    "CommandResult",
    "ConnectionProfile",
    "DatabaseResult",
    "DumpArtifact",
    "DumpKind",
    "DumpProfile",
    "ErrorPolicy",
    "GrantBlock",
    "QueryBackend",
    "RunContext",
    "RunResult",
    "RunState",
    "DUMP_PROFILES",
    "DEFAULT_EXCLUSIONS",
    # Errors
    "ArchivingError",
    "BackupError",
    "CleanupError",
    "CollisionError",
    "DumpError",
    "EnumerationError",
    "PreconditionError",
    "PrivilegeExtractionError",
    "QueryError",
    # Utilities
    "format_grants",
    "format_summary",
    "log_summary",
    "parse_grants",
    "reformat_grants",
    "resolve_executables",
    "setup_logging",
    "staging_name",
]
