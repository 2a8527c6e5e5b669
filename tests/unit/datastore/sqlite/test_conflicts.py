##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the `conflicts.py` module.
"""

import sqlite3

import pytest

from litesync.datastore.sqlite.conflicts import classify_storage_error, is_transient_error, is_uniqueness_violation
from litesync.exceptions import (
    ConstraintConflictError,
    DatastoreError,
    ServerTagConflictError,
    TransientStorageError,
)


def _raise_from(statements):
    """
    Run statements on a fresh in-memory database and return the error they raise.

    Args:
        statements: SQL statements, the last of which is expected to fail.

    Returns:
        The `sqlite3.Error` raised.
    """
    conn = sqlite3.connect(":memory:")
    try:
        for statement in statements:
            conn.execute(statement)
    except sqlite3.Error as exc:
        return exc
    finally:
        conn.close()
    pytest.fail("Expected the statements to raise an sqlite3.Error")


SCHEMA = "CREATE TABLE t (id TEXT PRIMARY KEY, tag TEXT, value TEXT NOT NULL)"
INDEX = "CREATE UNIQUE INDEX idx_tag ON t (tag) WHERE tag IS NOT NULL"


class TestIsUniquenessViolation:
    """
    Tests for `is_uniqueness_violation`.
    """

    def test_primary_key_violation(self):
        """
        Test that a duplicate primary key is a uniqueness violation.
        """
        exc = _raise_from([SCHEMA, "INSERT INTO t VALUES ('a', NULL, 'x')", "INSERT INTO t VALUES ('a', NULL, 'y')"])
        assert is_uniqueness_violation(exc) is True

    def test_partial_index_violation(self):
        """
        Test that a duplicate value in a partial unique index is a uniqueness violation.
        """
        exc = _raise_from(
            [SCHEMA, INDEX, "INSERT INTO t VALUES ('a', 'tag', 'x')", "INSERT INTO t VALUES ('b', 'tag', 'y')"]
        )
        assert is_uniqueness_violation(exc) is True

    def test_not_null_violation(self):
        """
        Test that a NOT NULL failure isn't a uniqueness violation.
        """
        exc = _raise_from([SCHEMA, "INSERT INTO t VALUES ('a', NULL, NULL)"])
        assert isinstance(exc, sqlite3.IntegrityError)
        assert is_uniqueness_violation(exc) is False

    def test_syntax_error(self):
        """
        Test that a syntax error isn't a uniqueness violation.
        """
        exc = _raise_from(["SELEC 1"])
        assert is_uniqueness_violation(exc) is False

    def test_message_fallback(self):
        """
        Test that an integrity error without an error code is recognized by its message.
        """
        assert is_uniqueness_violation(sqlite3.IntegrityError("UNIQUE constraint failed: t.id")) is True
        assert is_uniqueness_violation(sqlite3.IntegrityError("CHECK constraint failed: t")) is False

    def test_conflict_errors_are_violations(self):
        """
        Test that litesync conflict errors count as uniqueness violations.
        """
        assert is_uniqueness_violation(ServerTagConflictError("client1", "tag")) is True
        assert is_uniqueness_violation(ValueError("unique constraint failed")) is False


class TestIsTransientError:
    """
    Tests for `is_transient_error`.
    """

    @pytest.mark.parametrize("message", ["database is locked", "disk I/O error", "database table is locked"])
    def test_transient_messages(self, message: str):
        """
        Test that locked, busy and I/O failures are transient.

        Args:
            message: The message of the operational error.
        """
        assert is_transient_error(sqlite3.OperationalError(message)) is True

    def test_busy_error_code(self):
        """
        Test that an extended busy code is transient regardless of the message.
        """
        exc = sqlite3.OperationalError("something odd")
        exc.sqlite_errorcode = 261  # SQLITE_BUSY_RECOVERY
        assert is_transient_error(exc) is True

    def test_non_transient(self):
        """
        Test that a missing table and an integrity error are not transient.
        """
        assert is_transient_error(sqlite3.OperationalError("no such table: t")) is False
        assert is_transient_error(sqlite3.IntegrityError("database is locked")) is False


class TestClassifyStorageError:
    """
    Tests for `classify_storage_error`.
    """

    def test_uniqueness_becomes_conflict(self):
        """
        Test that a uniqueness violation becomes a `ConstraintConflictError`.
        """
        result = classify_storage_error(sqlite3.IntegrityError("UNIQUE constraint failed: t.id"))
        assert type(result) is ConstraintConflictError  # pylint: disable=unidiomatic-typecheck

    def test_locked_becomes_transient(self):
        """
        Test that a locked database becomes a `TransientStorageError`.
        """
        result = classify_storage_error(sqlite3.OperationalError("database is locked"))
        assert isinstance(result, TransientStorageError)
        assert isinstance(result, DatastoreError)

    def test_other_errors_become_fatal(self):
        """
        Test that any other failure becomes a plain `DatastoreError` naming the original type.
        """
        result = classify_storage_error(sqlite3.OperationalError("no such table: t"))
        assert type(result) is DatastoreError  # pylint: disable=unidiomatic-typecheck
        assert "OperationalError" in str(result)

    def test_litesync_errors_pass_through(self):
        """
        Test that a litesync error is returned unchanged.
        """
        error = ServerTagConflictError("client1", "tag")
        assert classify_storage_error(error) is error
        assert error.client_id == "client1"
        assert error.tag == "tag"
