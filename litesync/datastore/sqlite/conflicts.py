##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Classification of SQLite errors for the litesync datastore.

SQLite reports a primary key collision and a violation of the partial client tag
index as `sqlite3.IntegrityError`, the same class it uses for NOT NULL and CHECK
failures. This module tells those cases apart so that only genuine uniqueness
collisions become conflicts, while everything else stays a fatal error.
"""

import logging
import sqlite3
from typing import Optional

from litesync.exceptions import ConstraintConflictError, DatastoreError, LitesyncError, TransientStorageError


LOG = logging.getLogger(__name__)

# Extended result codes, see https://www.sqlite.org/rescode.html
SQLITE_CONSTRAINT_PRIMARYKEY = 1555
SQLITE_CONSTRAINT_UNIQUE = 2067
UNIQUENESS_ERROR_CODES = frozenset({SQLITE_CONSTRAINT_PRIMARYKEY, SQLITE_CONSTRAINT_UNIQUE})

# Primary result codes
SQLITE_BUSY = 5
SQLITE_LOCKED = 6
SQLITE_IOERR = 10
TRANSIENT_ERROR_CODES = frozenset({SQLITE_BUSY, SQLITE_LOCKED, SQLITE_IOERR})

UNIQUENESS_MESSAGES = ("unique constraint failed", "primary key must be unique", "is not unique")
TRANSIENT_MESSAGES = ("database is locked", "database table is locked", "disk i/o error", "unable to open database")


def _get_error_code(exc: sqlite3.Error) -> Optional[int]:
    """
    Get the extended SQLite error code of an exception, when Python exposes it.

    Args:
        exc: The SQLite exception.

    Returns:
        The extended error code, or None on interpreters without `sqlite_errorcode`.
    """
    return getattr(exc, "sqlite_errorcode", None)


def is_uniqueness_violation(exc: BaseException) -> bool:
    """
    Determine whether an exception is a primary key or unique index violation.

    Args:
        exc: The exception raised by the storage layer.

    Returns:
        True if `exc` is a uniqueness violation, False otherwise.
    """
    if isinstance(exc, ConstraintConflictError):
        return True
    if not isinstance(exc, sqlite3.IntegrityError):
        return False

    error_code = _get_error_code(exc)
    if error_code is not None:
        return error_code in UNIQUENESS_ERROR_CODES

    message = str(exc).lower()
    return any(fragment in message for fragment in UNIQUENESS_MESSAGES)


def is_transient_error(exc: BaseException) -> bool:
    """
    Determine whether an exception is worth retrying the whole operation for.

    Args:
        exc: The exception raised by the storage layer.

    Returns:
        True if `exc` looks like a locked, busy or I/O failure.
    """
    if not isinstance(exc, sqlite3.OperationalError):
        return False

    error_code = _get_error_code(exc)
    if error_code is not None and (error_code & 0xFF) in TRANSIENT_ERROR_CODES:
        return True

    message = str(exc).lower()
    return any(fragment in message for fragment in TRANSIENT_MESSAGES)


def classify_storage_error(exc: BaseException) -> LitesyncError:
    """
    Convert a low-level storage exception into a litesync exception.

    litesync exceptions are returned unchanged.

    Args:
        exc: The exception raised while talking to SQLite.

    Returns:
        A `ConstraintConflictError` for uniqueness violations, a `TransientStorageError`
        for locked/busy/I-O failures and a `DatastoreError` for anything else.
    """
    if isinstance(exc, LitesyncError):
        return exc
    if is_uniqueness_violation(exc):
        return ConstraintConflictError(str(exc))
    if is_transient_error(exc):
        return TransientStorageError(str(exc))
    return DatastoreError(f"{type(exc).__name__}: {exc}")
