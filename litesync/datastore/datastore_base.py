##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Abstract base class for datastores in the litesync application.

This module defines `Datastore`, the storage interface consumed by the sync
protocol engine. Concrete implementations (e.g. `SQLiteDatastore`) must provide
every storage operation with the following contract:

- Conflicts (uniqueness collisions, stale versions) are returned as booleans,
  never raised.
- Fatal failures are raised as `litesync.exceptions.DatastoreError`.
- Missing identifiers raise `litesync.exceptions.MissingIdentifierError` before
  any storage work is attempted.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

from litesync.datastore.data_models import SyncEntity


class Datastore(ABC):
    """
    Base class for all datastores supported in litesync.

    Attributes:
        datastore_name (str): The name of the datastore (e.g., "sqlite").

    Methods:
        get_name: Retrieve the name of the datastore.
        close: Release any resources held by the datastore.
        get_version: Query the datastore for its version.
        create_schema: Create the storage schema if it doesn't exist.
        insert_sync_entity: Insert one entity, reserving its client tag.
        insert_sync_entities_with_server_tags: Insert a batch of entities all-or-nothing.
        update_sync_entity: Conditionally update an entity on its stored version.
        get_updates_for_type: Page through changed entities of a data type.
        has_server_defined_unique_tag: Check whether a server tag is reserved.
        get_client_item_count: Count the stored items of a client.
        update_client_item_count: Record the item count of a client.
        clear_server_data: Retire every entity of a client.
        disable_sync_chain: Mark a client's sync chain as disabled.
        is_sync_chain_disabled: Check whether a client's sync chain is disabled.
    """

    def __init__(self, datastore_name: str):
        """
        Initialize the `Datastore` instance.

        Args:
            datastore_name: The name of the datastore (e.g., "sqlite").
        """
        self.datastore_name: str = datastore_name

    def get_name(self) -> str:
        """
        Get the name of the datastore.

        Returns:
            The name of the datastore (e.g. sqlite).
        """
        return self.datastore_name

    def close(self):
        """
        Release any resources held by the datastore. Does nothing by default.
        """

    @abstractmethod
    def get_version(self) -> str:
        """
        Query the datastore for the current version.

        Returns:
            A string representing the current version of the datastore.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement a `get_version` method.")

    @abstractmethod
    def create_schema(self):
        """
        Create the storage schema if it doesn't exist. Must be idempotent.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement a `create_schema` method.")

    @abstractmethod
    def insert_sync_entity(self, entity: SyncEntity) -> bool:
        """
        Insert a new entity, reserving its client defined unique tag if it has one.

        Args:
            entity: The entity to insert.

        Returns:
            True if the entity or its tag already exists (nothing was written).
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement an `insert_sync_entity` method.")

    @abstractmethod
    def insert_sync_entities_with_server_tags(self, entities: List[SyncEntity]) -> bool:
        """
        Insert a batch of entities, reserving their server defined unique tags.

        Args:
            entities: The entities to insert, processed in order.

        Returns:
            True if any entity or server tag collided (nothing was written).
        """
        raise NotImplementedError(
            "Subclasses of `Datastore` must implement an `insert_sync_entities_with_server_tags` method."
        )

    @abstractmethod
    def update_sync_entity(self, entity: SyncEntity, old_version: int) -> Tuple[bool, bool]:
        """
        Update an entity if its stored version equals `old_version`.

        Args:
            entity: The new state of the entity.
            old_version: The version the caller expects to be stored.

        Returns:
            A tuple `(conflict, deleted)`.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement an `update_sync_entity` method.")

    @abstractmethod
    def get_updates_for_type(
        self, data_type: int, client_token: int, fetch_folders: bool, client_id: str, max_size: int
    ) -> Tuple[bool, List[SyncEntity]]:
        """
        Get the entities of a data type changed since `client_token`.

        Args:
            data_type: The data type to query.
            client_token: Only entities with an mtime after this are returned.
            fetch_folders: If False, folders are left out.
            client_id: The client whose entities are queried.
            max_size: The maximum number of entities to return.

        Returns:
            A tuple `(has_changes_remaining, entities)`.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement a `get_updates_for_type` method.")

    @abstractmethod
    def has_server_defined_unique_tag(self, client_id: str, tag: str) -> bool:
        """
        Check whether a server defined unique tag is reserved for a client.

        Args:
            client_id: The client to check.
            tag: The server tag.

        Returns:
            True if the tag is reserved.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement a `has_server_defined_unique_tag` method.")

    @abstractmethod
    def get_client_item_count(self, client_id: str) -> int:
        """
        Count the items stored for a client.

        Args:
            client_id: The client to count.

        Returns:
            The number of stored items.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement a `get_client_item_count` method.")

    @abstractmethod
    def update_client_item_count(self, client_id: str, count: int):
        """
        Record the item count of a client.

        Args:
            client_id: The client to update.
            count: The new item count.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement an `update_client_item_count` method.")

    @abstractmethod
    def clear_server_data(self, client_id: str) -> List[SyncEntity]:
        """
        Retire every entity of a client.

        Args:
            client_id: The client to clear.

        Returns:
            The entities that were retired.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement a `clear_server_data` method.")

    @abstractmethod
    def disable_sync_chain(self, client_id: str):
        """
        Mark a client's sync chain as disabled.

        Args:
            client_id: The client to disable.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement a `disable_sync_chain` method.")

    @abstractmethod
    def is_sync_chain_disabled(self, client_id: str) -> bool:
        """
        Check whether a client's sync chain is disabled.

        Args:
            client_id: The client to check.

        Returns:
            True if the sync chain is disabled.
        """
        raise NotImplementedError("Subclasses of `Datastore` must implement an `is_sync_chain_disabled` method.")
