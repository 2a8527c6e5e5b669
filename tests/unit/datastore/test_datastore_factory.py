##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the `datastore_factory.py` module.
"""

import pytest
from pytest_mock import MockerFixture

from litesync.datastore.datastore_factory import DatastoreFactory, get_datastore
from litesync.datastore.sqlite.sqlite_connection import MEMORY_DB
from litesync.datastore.sqlite.sqlite_datastore import SQLiteDatastore
from litesync.exceptions import DatastoreNotSupportedError
from tests.fixture_types import FixtureStr


class TestDatastoreFactory:
    """
    Tests for `DatastoreFactory`.
    """

    def test_sqlite_is_builtin(self, mocker: MockerFixture):
        """
        Test that SQLite is registered under its name and its alias.

        Args:
            mocker: PyTest mocker fixture.
        """
        mocker.patch("litesync.abstracts.factory.entry_points", return_value=[])
        factory = DatastoreFactory()

        assert factory.list_available() == ["sqlite"]
        assert isinstance(factory.create("sqlite3", {"db_path": MEMORY_DB}), SQLiteDatastore)

    def test_unknown_datastore(self, mocker: MockerFixture):
        """
        Test that asking for an unregistered datastore raises `DatastoreNotSupportedError`.

        Args:
            mocker: PyTest mocker fixture.
        """
        mocker.patch("litesync.abstracts.factory.entry_points", return_value=[])

        with pytest.raises(DatastoreNotSupportedError, match="dynamodb"):
            DatastoreFactory().create("dynamodb")

    def test_rejects_non_datastore(self):
        """
        Test that only `Datastore` subclasses can be registered.
        """
        with pytest.raises(TypeError):
            DatastoreFactory().register("bad", dict)


class TestGetDatastore:
    """
    Tests for `get_datastore`.
    """

    def test_uses_configured_path(self, mocker: MockerFixture, db_file_path: FixtureStr):
        """
        Test that the datastore is created at the configured path with its schema.

        Args:
            mocker: PyTest mocker fixture.
            db_file_path: The path to a temporary database file.
        """
        mocker.patch("litesync.datastore.datastore_factory.get_db_path", return_value=db_file_path)

        datastore = get_datastore()
        try:
            assert isinstance(datastore, SQLiteDatastore)
            assert datastore.connection.db_path == db_file_path
            assert datastore.scan_sync_entities() == []
        finally:
            datastore.connection.close()

    def test_explicit_path(self, db_file_path: FixtureStr):
        """
        Test that an explicit path wins over the configuration.

        Args:
            db_file_path: The path to a temporary database file.
        """
        datastore = get_datastore(db_path=db_file_path, timeout=0.5)
        try:
            assert datastore.connection.db_path == db_file_path
            assert datastore.connection.timeout == 0.5
        finally:
            datastore.connection.close()

    def test_registered_datastore_gets_settings(self, mocker: MockerFixture, db_file_path: FixtureStr):
        """
        Test that the configured datastore class is built from path and timeout
        settings and opens its own storage handle.

        Args:
            mocker: PyTest mocker fixture.
            db_file_path: The path to a temporary database file.
        """
        received = {}

        class RecordingDatastore(SQLiteDatastore):
            def __init__(self, **kwargs):
                received.update(kwargs)
                super().__init__(**kwargs)

        factory = DatastoreFactory()
        factory.register("recording", RecordingDatastore)
        mocker.patch("litesync.datastore.datastore_factory.datastore_factory", factory)
        mocker.patch("litesync.datastore.datastore_factory.get_datastore_type", return_value="recording")

        datastore = get_datastore(db_path=db_file_path, timeout=0.5)
        try:
            assert isinstance(datastore, RecordingDatastore)
            assert received == {"db_path": db_file_path, "timeout": 0.5}
            assert datastore.connection.db_path == db_file_path
        finally:
            datastore.close()

        assert datastore.connection.conn is None
