"""
Unit tests for escaping backends.

These tests ensure the builders can escape through PyMySQL's converters or
any MySQL DB-API connection, and that backend detection fails loudly.
"""

from unittest.mock import MagicMock

import pytest
from ff_querybuilder import (
    ConnectionFailure,
    EscapeError,
    MySQLConnectionBackend,
    MySQLDMLQueryBuilder,
    MySQLEscaper,
    NullLogger,
    UnsupportedBackendError,
    detect_backend,
)
from ff_querybuilder.config import load_settings


class TestMySQLEscaper:
    """Test connection-less MySQL escaping."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("plain", "plain"),
            ("O'Reilly", "O\\'Reilly"),
            ('say "hi"', 'say \\"hi\\"'),
            ("back\\slash", "back\\\\slash"),
            ("line\nbreak", "line\\nbreak"),
            ("carriage\rreturn", "carriage\\rreturn"),
            ("nul\x00byte", "nul\\0byte"),
            ("ctrl\x1az", "ctrl\\Zz"),
        ],
    )
    def test_backslash_escaping(self, escaper, raw, expected):
        assert escaper.escape_string(raw) == expected

    def test_no_backslash_escapes_mode(self):
        """Test only quotes are doubled under NO_BACKSLASH_ESCAPES."""
        escaper = MySQLEscaper(no_backslash_escapes=True)
        assert escaper.escape_string("it's a\\b") == "it''s a\\b"

    def test_default_comes_from_settings(self):
        """Test the escaping mode defaults to the settings value."""
        settings = load_settings(log_format="null", no_backslash_escapes=True)
        assert MySQLEscaper(settings=settings).no_backslash_escapes is True

    def test_default_from_environment(self, monkeypatch):
        """Test FF_QB_NO_BACKSLASH_ESCAPES is honoured by the cached settings."""
        monkeypatch.setenv("FF_QB_NO_BACKSLASH_ESCAPES", "true")
        assert MySQLEscaper().no_backslash_escapes is True

    def test_escaping_is_deterministic(self, escaper):
        raw = "a'b\\c\n"
        assert escaper.escape_string(raw) == escaper.escape_string(raw)

    def test_escaping_is_not_idempotent(self, escaper):
        """Test double escaping changes the value, so the builder must escape once."""
        once = escaper.escape_string("a'b")
        assert escaper.escape_string(once) != once

    def test_get_query_builder(self, escaper, settings):
        """Test the backend hands out builders bound to itself."""
        builder = escaper.get_query_builder(logger=NullLogger("test"), settings=settings)

        assert isinstance(builder, MySQLDMLQueryBuilder)
        assert builder.backend is escaper
        assert builder.value("a'b") == "'a\\'b'"


class TestMySQLConnectionBackend:
    """Test escaping through a live connection."""

    def test_delegates_to_connection(self):
        connection = MagicMock()
        connection.escape_string.return_value = "x\\'y"
        backend = MySQLConnectionBackend(connection)

        assert backend.escape_string("x'y") == "x\\'y"
        connection.escape_string.assert_called_once_with("x'y")

    def test_bytes_result_is_decoded(self):
        """Test mysqlclient-style bytes results."""
        connection = MagicMock()
        connection.escape_string.return_value = b"caf\xc3\xa9"

        assert MySQLConnectionBackend(connection).escape_string("café") == "café"

    def test_missing_connection_raises(self):
        backend = MySQLConnectionBackend(None)

        with pytest.raises(ConnectionFailure, match="No database connection"):
            backend.escape_string("a")

    def test_missing_connection_surfaces_through_builder(self, settings):
        """Test the builder wraps backend failures in EscapeError."""
        builder = MySQLConnectionBackend(None).get_query_builder(
            logger=NullLogger("test"), settings=settings
        )

        with pytest.raises(EscapeError) as exc_info:
            builder.likevalue("a")

        assert isinstance(exc_info.value.__cause__, ConnectionFailure)

    def test_connection_errors_propagate(self):
        """Test driver errors are not swallowed."""
        connection = MagicMock()
        connection.escape_string.side_effect = RuntimeError("connection closed")

        with pytest.raises(RuntimeError, match="connection closed"):
            MySQLConnectionBackend(connection).escape_string("a")


class TestBackendDetection:
    """Test automatic detection of the backend from a connection."""

    @pytest.mark.parametrize(
        "module", ["pymysql.connections", "aiomysql.connection", "MySQLdb.connections"]
    )
    def test_detect_mysql_connections(self, module):
        connection = MagicMock()
        connection.__module__ = module

        backend = detect_backend(connection)

        assert isinstance(backend, MySQLConnectionBackend)
        assert backend.connection is connection
        assert backend.dialect == "mysql"

    def test_detect_unknown_connection_raises(self):
        """Test that unknown connection types raise an appropriate error."""
        connection = MagicMock()
        connection.__module__ = "psycopg2.extensions"

        with pytest.raises(ValueError, match="Unsupported database connection type"):
            detect_backend(connection)

    def test_unsupported_error_lists_supported_drivers(self):
        connection = MagicMock()
        connection.__module__ = "sqlite3"

        with pytest.raises(UnsupportedBackendError) as exc_info:
            detect_backend(connection)

        assert exc_info.value.connection_type == "sqlite3"
        assert "pymysql" in exc_info.value.supported
