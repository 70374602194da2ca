"""
Discovery of the databases to back up.
"""

import fnmatch
import logging
import re
from typing import Optional

from .context import RunContext
from .errors import EnumerationError, QueryError
from .query import QueryInterface


DEFAULT_EXCLUSIONS = [
    'test',
    'information_schema',
    'mysql',
    'performance_schema',
    'phpmyadmin',
]


class TargetEnumerator:
    """Lists the databases visible to the backup user, minus the exclusions."""

    def __init__(self, query: QueryInterface, exclusions: Optional[list[str]] = None):
        self.query = query
        self.exclusions = list(DEFAULT_EXCLUSIONS if exclusions is None else exclusions)
        self._compiled = [re.compile(fnmatch.translate(p)) for p in self.exclusions]

    def is_excluded(self, database: str) -> bool:
        """
        Check a database name against the exclusion list.

        Supports exact names ('mysql') and wildcard patterns ('tmp_*').
        """
        for pattern, compiled in zip(self.exclusions, self._compiled):
            if compiled.match(database):
                logging.debug(f"Database '{database}' excluded by pattern '{pattern}'")
                return True
        return False

    def enumerate(self, context: RunContext) -> list[str]:
        """
        Return backup targets in server order.

        Names are taken verbatim as whitespace-separated tokens.

        Raises:
            EnumerationError: if the query fails or returns nothing.
        """
        try:
            output = self.query.query("SHOW DATABASES;")
        except QueryError as e:
            raise EnumerationError(f"Could not list databases: {e}") from e

        names = output.split()
        if not names:
            raise EnumerationError("Server returned no databases")

        targets = [name for name in names if not self.is_excluded(name)]
        logging.info(f"Found {len(targets)} valid database(s).")
        if not targets:
            context.record_warning("No databases left to back up after exclusions")
        return targets
