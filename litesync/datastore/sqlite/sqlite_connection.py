##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
SQLite connection handle and transaction helper for the litesync application.

This module defines the `SQLiteConnection` class, the single storage handle that
is injected into a datastore. It opens the database with safe configuration
(autocommit mode so transaction boundaries are explicit, WAL journaling,
dictionary-style rows) and provides `transaction`, the unit-of-work primitive
that every mutating datastore operation runs under: commit on success, rollback
on any exception.
"""

import logging
import sqlite3
import sys
import threading
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Callable, Iterator, Optional, Type, TypeVar

from litesync.datastore.sqlite.conflicts import classify_storage_error


LOG = logging.getLogger(__name__)

R = TypeVar("R")

MEMORY_DB = ":memory:"


class SQLiteConnection:
    """
    A shared SQLite storage handle.

    One connection is opened lazily and reused for every operation. A re-entrant
    lock serialises use of that connection, so a handle can be shared across
    threads while each transaction still sees a consistent view.

    Attributes:
        db_path (str): Path to the SQLite database file, or ":memory:".
        timeout (float): Seconds SQLite waits on a locked database before failing.
        conn (sqlite3.Connection): The open connection, None until `connect` is called.

    Methods:
        connect:
            Open and configure the SQLite connection if it isn't open already.

        close:
            Close the SQLite connection.

        transaction:
            Context manager running a block of work inside a single transaction.

        execute_in_transaction:
            Run a callable inside a single transaction and return its result.
    """

    def __init__(self, db_path: str = None, timeout: float = None):
        """
        Initialize the handle. No connection is opened until it is first needed.

        Args:
            db_path: Path to the database file. Defaults to the configured path.
            timeout: Seconds to wait on a locked database. Defaults to the configured timeout.
        """
        from litesync.config.datastore import get_db_path, get_timeout  # pylint: disable=import-outside-toplevel

        self.db_path: str = db_path if db_path is not None else get_db_path()
        self.timeout: float = timeout if timeout is not None else get_timeout()
        self.conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(db_path={self.db_path!r})"

    def __enter__(self) -> "SQLiteConnection":
        """
        Enters the runtime context and opens the connection.

        Returns:
            This handle.
        """
        self.connect()
        return self

    def __exit__(self, exc_type: Type[Exception], exc_value: Exception, traceback: TracebackType):
        """
        Exits the runtime context and closes the connection.

        Args:
            exc_type: The exception type raised, if any.
            exc_value: The exception instance raised, if any.
            traceback: The traceback object, if an exception was raised.
        """
        self.close()

    def connect(self) -> sqlite3.Connection:
        """
        Open and configure the SQLite connection if it isn't open already.

        Returns:
            The open sqlite connection.
        """
        with self._lock:
            if self.conn is not None:
                return self.conn

            if self.db_path != MEMORY_DB:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            connection_kwargs = {"check_same_thread": False, "timeout": self.timeout}
            if sys.version_info < (3, 12):  # Autocommit wasn't added until python 3.12
                connection_kwargs["isolation_level"] = None
            else:
                connection_kwargs["autocommit"] = True

            LOG.debug(f"Opening SQLite database at '{self.db_path}'.")
            conn = sqlite3.connect(self.db_path, **connection_kwargs)

            # Enable WAL mode for better concurrent access
            if self.db_path != MEMORY_DB:
                conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA foreign_keys=ON")

            # This enables name-based access to columns
            conn.row_factory = sqlite3.Row

            self.conn = conn
            return self.conn

    def close(self):
        """
        Close the SQLite connection if it is open.
        """
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None
                LOG.debug(f"Closed SQLite database at '{self.db_path}'.")

    @contextmanager
    def transaction(self, immediate: bool = True) -> Iterator[sqlite3.Connection]:
        """
        Run the enclosed block inside a single transaction.

        The transaction is committed when the block exits normally and rolled back
        when it raises. SQLite errors are classified (conflict, transient or fatal)
        before being re-raised; any other exception is re-raised untouched. A block
        nested inside another transaction on the same handle joins the outer one.

        Usage:
            with handle.transaction() as conn:
                conn.execute(...)

        Args:
            immediate: If True, start with `BEGIN IMMEDIATE` so the write lock is
                taken up front; otherwise start a deferred (read) transaction.

        Yields:
            The sqlite connection to run statements on.
        """
        with self._lock:
            conn = self.connect()

            if conn.in_transaction:
                LOG.debug("Joining the transaction already open on this handle.")
                yield conn
                return

            try:
                conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            except sqlite3.Error as exc:
                raise classify_storage_error(exc) from exc
            LOG.debug(f"Transaction started on thread {threading.get_ident()}.")

            try:
                yield conn
            except sqlite3.Error as exc:
                self._rollback(conn, exc)
                raise classify_storage_error(exc) from exc
            except BaseException as exc:
                self._rollback(conn, exc)
                raise

            try:
                conn.execute("COMMIT")
            except sqlite3.Error as exc:
                LOG.error(f"Commit failed on thread {threading.get_ident()}: {exc}")
                self._rollback(conn, exc)
                raise classify_storage_error(exc) from exc
            LOG.debug(f"Transaction committed on thread {threading.get_ident()}.")

    def _rollback(self, conn: sqlite3.Connection, reason: BaseException):
        """
        Roll back the open transaction, if SQLite hasn't already done so.

        Args:
            conn: The connection holding the transaction.
            reason: The exception that caused the rollback, for logging.
        """
        LOG.debug(f"Rolling back transaction on thread {threading.get_ident()}: {type(reason).__name__} - {reason}")
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error as rb_err:
            LOG.critical(f"Rollback failed on thread {threading.get_ident()}: {rb_err}")

    def execute_in_transaction(self, work: Callable[[sqlite3.Connection], R], immediate: bool = True) -> R:
        """
        Run `work` inside a single transaction and return its result.

        Args:
            work: A callable that receives the sqlite connection.
            immediate: If True, take the write lock at the start of the transaction.

        Returns:
            Whatever `work` returns.
        """
        with self.transaction(immediate=immediate) as conn:
            return work(conn)
