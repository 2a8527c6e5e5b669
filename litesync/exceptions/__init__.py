##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Module of all litesync-specific exception types.

Conflicts (`ConstraintConflictError` and its subclasses) are recoverable and are
turned into a `conflict` return value by the datastore. `DatastoreError` and its
subclasses are fatal for the operation and propagate to the caller.
"""

__all__ = (
    "LitesyncError",
    "ConstraintConflictError",
    "ServerTagConflictError",
    "DatastoreError",
    "TransientStorageError",
    "MissingIdentifierError",
    "DatastoreNotSupportedError",
)


class LitesyncError(Exception):
    """
    Base class for every litesync error.
    """


class ConstraintConflictError(LitesyncError):
    """
    Exception to signal that a write collided with the primary key or
    with the client tag uniqueness index.
    """


class ServerTagConflictError(ConstraintConflictError):
    """
    Exception to signal that a server defined unique tag is already
    reserved for a client.
    """

    def __init__(self, client_id: str, tag: str):
        super().__init__(f"Server defined unique tag '{tag}' already exists for client '{client_id}'.")
        self.client_id = client_id
        self.tag = tag


class DatastoreError(LitesyncError):
    """
    Exception for fatal storage failures. These must never be
    interpreted as conflicts.
    """


class TransientStorageError(DatastoreError):
    """
    Exception for storage failures that may succeed if the whole
    operation is retried (locked or busy database, I/O hiccups).
    """


class MissingIdentifierError(LitesyncError, ValueError):
    """
    Exception raised before any transaction is opened when an entity
    lacks its client ID or ID.
    """


class DatastoreNotSupportedError(Exception):
    """
    Exception to signal that the provided datastore type is not supported.
    """
