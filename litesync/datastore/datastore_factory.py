##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Datastore factory for selecting and instantiating datastores in litesync.

This module defines the `DatastoreFactory` class, which maps datastore names and
aliases to `Datastore` implementations, and `get_datastore`, which builds the
configured datastore with its storage handle and makes sure its schema exists.
"""

import logging
from typing import Any, Type

from litesync.abstracts import LitesyncBaseFactory
from litesync.config.datastore import get_datastore_type, get_db_path, get_timeout
from litesync.datastore.datastore_base import Datastore
from litesync.datastore.sqlite.sqlite_datastore import SQLiteDatastore
from litesync.exceptions import DatastoreNotSupportedError


LOG = logging.getLogger(__name__)


class DatastoreFactory(LitesyncBaseFactory):
    """
    Factory class for managing and instantiating supported litesync datastores.

    Attributes:
        _registry (Dict[str, Datastore]): Maps canonical datastore names to datastore classes.
        _aliases (Dict[str, str]): Maps alternate names to canonical datastore names.

    Methods:
        register: Register a new datastore class and optional aliases.
        list_available: Return a list of supported datastore names.
        create: Instantiate a datastore class by name or alias.
        get_component_info: Return metadata about a registered datastore.
    """

    def _register_builtins(self):
        """
        Register built-in datastore implementations.
        """
        self.register("sqlite", SQLiteDatastore, aliases=["sqlite3"])

    def _validate_component(self, component_class: Any):
        """
        Ensure registered component is a subclass of Datastore.

        Args:
            component_class: The class to validate.

        Raises:
            TypeError: If the component does not subclass Datastore.
        """
        if not isinstance(component_class, type) or not issubclass(component_class, Datastore):
            raise TypeError(f"{component_class} must inherit from Datastore")

    def _entry_point_group(self) -> str:
        """
        Entry point group used for discovering datastore plugins.

        Returns:
            The entry point namespace for litesync datastore plugins.
        """
        return "litesync.datastores"

    def _raise_component_error_class(self, msg: str) -> Type[Exception]:
        """
        Raise an appropriate exception for unsupported components.

        Args:
            msg: The message to add to the error being raised.

        Raises:
            DatastoreNotSupportedError: Always.
        """
        raise DatastoreNotSupportedError(msg)


datastore_factory = DatastoreFactory()


def get_datastore(db_path: str = None, timeout: float = None) -> Datastore:
    """
    Build the configured datastore and create its schema if needed.

    Args:
        db_path: Path to the database. Defaults to the configured path.
        timeout: Seconds to wait on a locked database. Defaults to the configured timeout.

    Returns:
        A ready to use `Datastore` instance.

    Raises:
        DatastoreNotSupportedError: If the configured datastore type isn't registered.
    """
    datastore_type = get_datastore_type()
    settings = {
        "db_path": db_path if db_path is not None else get_db_path(),
        "timeout": timeout if timeout is not None else get_timeout(),
    }
    LOG.debug(f"Creating '{datastore_type}' datastore at '{settings['db_path']}'.")

    # Each datastore class opens its own storage handle from these settings
    datastore = datastore_factory.create(datastore_type, settings)
    datastore.create_schema()
    return datastore
