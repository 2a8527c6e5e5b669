##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Storage layer for the litesync application.

The `datastore` package persists the entities of the sync protocol. It defines the
abstract `Datastore` interface consumed by the protocol engine and a relational
implementation backed by SQLite.

Subpackages:
    sqlite: SQLite implementation, including the connection handle, tag rows and error classification.

Modules:
    data_models: Dataclasses for sync entities and tag items.
    datastore_base: Defines the abstract `Datastore` base class.
    datastore_factory: Contains `DatastoreFactory`, used to select and instantiate a datastore.
    utils: Row serialization, deserialization and identifier validation.
"""
