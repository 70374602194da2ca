"""
Unit tests for connection.py
"""

from unittest import mock

import pytest
from mysql.connector import Error as MySQLError

from mysqldump_extended.connection import DatabaseConnection
from mysqldump_extended.models import ConnectionProfile


@pytest.fixture
def profile():
    return ConnectionProfile(host="localhost", user="root", password="secret", charset="utf8", port=3306)


class TestDatabaseConnection:
    """Tests for DatabaseConnection class."""

    def test_init(self, profile):
        """Test connection initialization."""
        conn = DatabaseConnection(profile)
        assert conn.profile == profile
        assert conn.connection is None

    @mock.patch('mysqldump_extended.connection.mysql.connector.connect')
    def test_connect(self, mock_connect, profile):
        """Test database connection establishment."""
        mock_connection = mock.MagicMock()
        mock_connect.return_value = mock_connection

        conn = DatabaseConnection(profile)
        conn.connect()

        mock_connect.assert_called_once_with(
            host="localhost",
            port=3306,
            user="root",
            password="secret",
            charset="utf8",
            use_unicode=True
        )
        assert conn.connection == mock_connection

    @mock.patch('mysqldump_extended.connection.mysql.connector.connect')
    def test_connect_failure(self, mock_connect, profile):
        """Test connection errors propagate."""
        mock_connect.side_effect = MySQLError("Access denied")

        conn = DatabaseConnection(profile)
        with pytest.raises(MySQLError):
            conn.connect()

    @mock.patch('mysqldump_extended.connection.mysql.connector.connect')
    def test_disconnect(self, mock_connect, profile):
        """Test database disconnection."""
        mock_connection = mock.MagicMock()
        mock_connection.is_connected.return_value = True
        mock_connect.return_value = mock_connection

        conn = DatabaseConnection(profile)
        conn.connect()
        conn.disconnect()

        mock_connection.close.assert_called_once()

    def test_disconnect_without_connection(self, profile):
        """Test disconnect is a no-op when never connected."""
        conn = DatabaseConnection(profile)
        conn.disconnect()

    @mock.patch('mysqldump_extended.connection.mysql.connector.connect')
    def test_context_manager(self, mock_connect, profile):
        """Test context manager connects and disconnects."""
        mock_connection = mock.MagicMock()
        mock_connection.is_connected.return_value = True
        mock_connect.return_value = mock_connection

        with DatabaseConnection(profile) as conn:
            assert conn.connection == mock_connection

        mock_connection.close.assert_called_once()


class TestQueries:
    """Tests for query helpers."""

    @pytest.fixture
    def conn(self, profile):
        conn = DatabaseConnection(profile)
        conn.connection = mock.MagicMock()
        return conn

    def test_execute_query(self, conn):
        """Test query execution returns rows and closes the cursor."""
        cursor = conn.connection.cursor.return_value
        cursor.fetchall.return_value = [("app",), ("mysql",)]

        rows = conn.execute_query("SHOW DATABASES")

        cursor.execute.assert_called_once_with("SHOW DATABASES", None)
        cursor.close.assert_called_once()
        assert rows == [("app",), ("mysql",)]

    def test_execute_query_closes_cursor_on_error(self, conn):
        """Test cursor is closed when the query fails."""
        cursor = conn.connection.cursor.return_value
        cursor.execute.side_effect = MySQLError("syntax")

        with pytest.raises(MySQLError):
            conn.execute_query("BROKEN")
        cursor.close.assert_called_once()

    def test_execute_with_columns(self, conn):
        """Test column names are returned with the rows."""
        cursor = conn.connection.cursor.return_value
        cursor.column_names = ("Grants for app@%",)
        cursor.fetchall.return_value = [("GRANT USAGE ON *.* TO `app`@`%`",)]

        columns, rows = conn.execute_with_columns("SHOW GRANTS FOR 'app'@'%';")

        assert columns == ["Grants for app@%"]
        assert rows == [("GRANT USAGE ON *.* TO `app`@`%`",)]
