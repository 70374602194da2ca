"""
Administrative query interfaces.

Both implementations return plain text shaped like the ``mysql`` client's
batch output: one row per line, columns separated by tabs.
"""

import logging
from typing import Protocol

from mysql.connector import Error as MySQLError

from .connection import DatabaseConnection
from .errors import QueryError
from .models import ConnectionProfile, QueryBackend
from .runner import Runner


class QueryInterface(Protocol):
    def query(self, sql: str) -> str:
        """Run one statement; rows only, no column names."""
        ...

    def run_script(self, statements: list[str]) -> str:
        """Run statements as one batch; each result set preceded by its column names."""
        ...


class ClientQueryInterface:
    """Runs queries through the ``mysql`` command-line client."""

    def __init__(self, runner: Runner, profile: ConnectionProfile):
        self.runner = runner
        self.profile = profile

    def query(self, sql: str) -> str:
        args = self.profile.client_options() + ['--batch', '--skip-column-names', '--execute', sql]
        result = self.runner.run('mysql', args)
        if not result.ok:
            raise QueryError(f"mysql exited with status {result.returncode}: {result.stderr.strip()}")
        return result.stdout

    def run_script(self, statements: list[str]) -> str:
        script = '\n'.join(statements) + '\n'
        result = self.runner.run('mysql', self.profile.client_options(), stdin=script)
        if not result.ok:
            raise QueryError(f"mysql exited with status {result.returncode}: {result.stderr.strip()}")
        return result.stdout


class ConnectorQueryInterface:
    """Runs queries over a mysql-connector connection."""

    def __init__(self, profile: ConnectionProfile):
        self.profile = profile

    def query(self, sql: str) -> str:
        try:
            with DatabaseConnection(self.profile) as conn:
                rows = conn.execute_query(sql.rstrip().rstrip(";"))
        except MySQLError as e:
            raise QueryError(str(e)) from e
        return ''.join(_format_row(row) for row in rows)

    def run_script(self, statements: list[str]) -> str:
        lines = []
        try:
            with DatabaseConnection(self.profile) as conn:
                for statement in statements:
                    logging.debug(f"Executing: {statement}")
                    columns, rows = conn.execute_with_columns(statement.rstrip().rstrip(";"))
                    lines.append(_format_row(columns))
                    lines.extend(_format_row(row) for row in rows)
        except MySQLError as e:
            raise QueryError(str(e)) from e
        return ''.join(lines)


def _format_row(row) -> str:
    values = []
    for value in row:
        if isinstance(value, (bytes, bytearray)):
            value = value.decode('utf-8', errors='replace')
        values.append('NULL' if value is None else str(value))
    return '\t'.join(values) + '\n'


def create_query_interface(
    backend: QueryBackend,
    runner: Runner,
    profile: ConnectionProfile
) -> QueryInterface:
    """Build the query interface selected in the settings."""
    if backend is QueryBackend.CONNECTOR:
        return ConnectorQueryInterface(profile)
    return ClientQueryInterface(runner, profile)
