"""
Extraction of user privileges into a replayable script.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .context import RunContext, Timer
from .errors import PrivilegeExtractionError, QueryError
from .models import DumpArtifact, DumpKind
from .query import QueryInterface


SHOW_GRANTS_QUERY = (
    "SELECT DISTINCT CONCAT("
    "'SHOW GRANTS FOR ''', user, '''@''', host, ''';'"
    ") AS query FROM mysql.user"
)

HEADER_PATTERN = re.compile(r'^(?:## )?Grants for (?P<principal>.*?)(?: ##)?$')
GRANT_MARKER = 'GRANT '


@dataclass
class GrantBlock:
    """Grant statements of one principal. ``principal`` is None for lines seen before any header."""
    principal: Optional[str]
    grants: list[str] = field(default_factory=list)

    @property
    def header(self) -> str:
        return f"## Grants for {self.principal} ##"


def terminate(line: str) -> str:
    """Append a statement terminator to grant lines that lack one."""
    if GRANT_MARKER in line and not line.endswith(';'):
        return line + ';'
    return line


def parse_grants(text: str) -> list[GrantBlock]:
    """Split ``SHOW GRANTS`` batch output into per-principal blocks."""
    blocks: list[GrantBlock] = []
    current: Optional[GrantBlock] = None

    for raw in text.splitlines():
        line = raw.rstrip()
        if not line:
            continue

        match = HEADER_PATTERN.match(line)
        if match:
            current = GrantBlock(principal=match.group('principal'))
            blocks.append(current)
            continue

        if current is None:
            current = GrantBlock(principal=None)
            blocks.append(current)
        current.grants.append(line)

    return blocks


def format_grants(blocks: list[GrantBlock]) -> str:
    """
    Render blocks as a script grouped by principal.

    Each block is introduced by an empty separator line and a
    ``## Grants for user@host ##`` comment, followed by its statements.
    """
    lines = []
    for block in blocks:
        if block.principal is not None:
            lines.append('')
            lines.append(block.header)
        lines.extend(terminate(grant) for grant in block.grants)
    return '\n'.join(lines) + '\n' if lines else ''


def reformat_grants(text: str) -> str:
    """Parse and re-render; applying it twice gives the same result."""
    return format_grants(parse_grants(text))


class PrivilegeExtractor:
    """Two-pass grant extraction: build SHOW GRANTS statements, then run them."""

    def __init__(self, query: QueryInterface):
        self.query = query

    def extract(self) -> str:
        """
        Return the reformatted privilege script.

        Raises:
            PrivilegeExtractionError: if either query pass fails.
        """
        try:
            statements = [
                line.strip()
                for line in self.query.query(SHOW_GRANTS_QUERY).splitlines()
                if line.strip()
            ]
        except QueryError as e:
            raise PrivilegeExtractionError(f"Could not list principals: {e}") from e

        logging.debug(f"Collected {len(statements)} SHOW GRANTS statement(s)")
        if not statements:
            return ''

        try:
            output = self.query.run_script(statements)
        except QueryError as e:
            raise PrivilegeExtractionError(f"Could not read grants: {e}") from e

        return reformat_grants(output)

    def extract_to(self, staging_dir: Path, context: RunContext) -> DumpArtifact:
        """Write the privilege script to ``PRIVILEGES.sql`` in the staging directory."""
        timer = Timer()
        with timer.measure():
            script = self.extract()
            if not script:
                context.record_warning("No grants found; PRIVILEGES.sql is empty")
            path = staging_dir / DumpKind.PRIVILEGES.file_name()
            try:
                with open(path, 'x', encoding='utf-8') as f:
                    f.write(script)
            except OSError as e:
                raise PrivilegeExtractionError(f"Could not write {path}: {e}") from e

        logging.info(f"- dumping PRIVILEGES... done in {timer.elapsed:.0f} second(s).")
        return DumpArtifact(target=None, kind=DumpKind.PRIVILEGES, path=path)
