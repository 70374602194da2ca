"""
Per-run context passed explicitly to every component.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .errors import BackupError
from .models import ErrorPolicy


@dataclass
class RunContext:
    """Error policy and the error collector for one run."""
    error_policy: ErrorPolicy = ErrorPolicy.CONTINUE
    errors: list[dict[str, Any]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def record_error(
        self,
        error: BackupError,
        database: Optional[str] = None,
        kind: Optional[str] = None
    ) -> None:
        """Remember a non-fatal error for the final summary."""
        logging.error(f"{type(error).__name__}: {error}")
        self.errors.append({
            'database': database,
            'kind': kind,
            'type': type(error).__name__,
            'error': str(error),
        })

    def record_warning(self, message: str) -> None:
        logging.warning(message)
        self.warnings.append(message)

    @property
    def abort_on_error(self) -> bool:
        return self.error_policy is ErrorPolicy.ABORT


class Timer:
    """Wall-clock stopwatch; ``elapsed`` is fixed once the block exits."""

    def __init__(self):
        self.started: float = 0.0
        self.elapsed: float = 0.0

    @contextmanager
    def measure(self) -> Iterator["Timer"]:
        self.started = time.monotonic()
        try:
            yield self
        finally:
            self.elapsed = time.monotonic() - self.started
