"""
Direct server connection for administrative queries.
"""

import logging
from typing import Optional

import mysql.connector
from mysql.connector import Error as MySQLError

from .models import ConnectionProfile


class DatabaseConnection:
    """Manages a MySQL connection with context manager support."""

    def __init__(self, profile: ConnectionProfile):
        self.profile = profile
        self.connection = None

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = mysql.connector.connect(
                host=self.profile.host,
                port=self.profile.port,
                user=self.profile.user,
                password=self.profile.password,
                charset=self.profile.charset,
                use_unicode=True
            )
            logging.info(f"Connected to {self.profile.host}:{self.profile.port}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def execute_with_columns(self, query: str) -> tuple[list[str], list[tuple]]:
        """Execute a query and return its column names along with the rows."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query)
            rows = cursor.fetchall()
            return list(cursor.column_names), rows
        finally:
            cursor.close()
