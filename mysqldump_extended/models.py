"""
Data models and enums for mysqldump-extended.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class DumpKind(Enum):
    """Object-kind slice written to one artifact file."""
    STRUCTURE = "structure"
    DATA = "data"
    TRIGGERS = "triggers"
    EVENTS = "events"
    ROUTINES = "routines"
    PRIVILEGES = "privileges"

    @property
    def ordinal(self) -> int:
        return _ORDINALS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    def file_name(self, database: Optional[str] = None) -> str:
        """Artifact file name, e.g. ``app.2-DATA.sql`` or ``PRIVILEGES.sql``."""
        if self is DumpKind.PRIVILEGES:
            return f"{self.label}.sql"
        return f"{database}.{self.ordinal}-{self.label}.sql"


_ORDINALS = {
    DumpKind.STRUCTURE: 1,
    DumpKind.DATA: 2,
    DumpKind.TRIGGERS: 3,
    DumpKind.EVENTS: 4,
    DumpKind.ROUTINES: 5,
    DumpKind.PRIVILEGES: 6,
}

_LABELS = {
    DumpKind.STRUCTURE: "DB+TABLES+VIEWS",
    DumpKind.DATA: "DATA",
    DumpKind.TRIGGERS: "TRIGGERS",
    DumpKind.EVENTS: "EVENTS",
    DumpKind.ROUTINES: "ROUTINES",
    DumpKind.PRIVILEGES: "PRIVILEGES",
}


class ErrorPolicy(Enum):
    """What to do when a single dump profile fails."""
    CONTINUE = "continue"
    ABORT = "abort"


class QueryBackend(Enum):
    """How administrative queries reach the server."""
    CLIENT = "client"
    CONNECTOR = "connector"


class RunState(Enum):
    """States of a backup run."""
    VALIDATING = "validating"
    CLEANING = "cleaning"
    STAGING = "staging"
    DUMPING = "dumping"
    EXTRACTING_PRIVILEGES = "extracting_privileges"
    ARCHIVING = "archiving"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ConnectionProfile:
    """Server connection parameters shared by every external invocation."""
    host: str = "localhost"
    user: str = "mysqldump"
    password: str = field(default="", repr=False)
    charset: str = "utf8"
    port: int = 3306

    def client_options(self) -> list[str]:
        """Options understood by both ``mysql`` and ``mysqldump``."""
        return [
            f"--default-character-set={self.charset}",
            f"--host={self.host}",
            f"--port={self.port}",
            f"--user={self.user}",
            f"--password={self.password}",
        ]


@dataclass(frozen=True)
class DumpArtifact:
    """One artifact file: a kind-slice of one database, or the global privileges."""
    target: Optional[str]
    kind: DumpKind
    path: Path


@dataclass
class DatabaseResult:
    """Outcome of decomposing one database."""
    name: str
    artifacts: list[DumpArtifact] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass
class RunResult:
    """Aggregate outcome of one backup run. Reported only."""
    state: RunState = RunState.VALIDATING
    databases: list[DatabaseResult] = field(default_factory=list)
    privileges: Optional[DumpArtifact] = None
    privileges_elapsed: float = 0.0
    staging_dir: Optional[Path] = None
    archive_path: Optional[Path] = None
    archive_size: Optional[int] = None
    errors: list[dict[str, Any]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def target_count(self) -> int:
        return len(self.databases)

    @property
    def archived(self) -> bool:
        return self.archive_path is not None
