##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
SQLite datastore implementation for the litesync application.

This module defines the `SQLiteDatastore` class, a concrete implementation of the
`Datastore` interface that stores sync entities in a single SQLite table,
`sync_entities`, keyed by `(client_id, id)`.

Key-value conditional writes are emulated as follows:

- Client and server defined unique tags are reserved with shadow rows in the same
  table (see `shadow_tags`), written in the same transaction as their entity.
- A partial unique index on `(client_id, client_defined_unique_tag)` is the final
  arbiter of client tag uniqueness among live entities.
- Updates are compare-and-swap on the stored `version`.

Uniqueness collisions and stale versions are reported as `conflict` booleans.
Any other storage failure is raised as a `DatastoreError`.
"""

import logging
import sqlite3
from typing import Dict, List, Optional, Tuple

from litesync.datastore.data_models import SyncEntity, TagItem
from litesync.datastore.datastore_base import Datastore
from litesync.datastore.sqlite import shadow_tags
from litesync.datastore.sqlite.shadow_tags import TABLE_NAME, TAG_ID_CONDITION, client_tag_id, server_tag_id
from litesync.datastore.sqlite.sqlite_connection import SQLiteConnection
from litesync.datastore.utils import (
    SYNC_ENTITY_COLUMNS,
    deserialize_rows,
    now_in_milliseconds,
    serialize_entity,
    validate_client_id,
    validate_identifiers,
)
from litesync.exceptions import ConstraintConflictError, ServerTagConflictError


LOG = logging.getLogger(__name__)

DISABLED_CHAIN_ID = "disabled_chain"
CLIENT_TAG_INDEX_NAME = "idx_sync_entities_client_tag"

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    client_id TEXT NOT NULL,
    id TEXT NOT NULL,
    parent_id TEXT,
    version INTEGER,
    mtime INTEGER,
    ctime INTEGER,
    name TEXT,
    non_unique_name TEXT,
    server_defined_unique_tag TEXT,
    deleted BOOLEAN,
    originator_cache_guid TEXT,
    originator_client_item_id TEXT,
    specifics BLOB,
    data_type INTEGER,
    folder BOOLEAN,
    client_defined_unique_tag TEXT,
    unique_position BLOB,
    data_type_mtime TEXT,
    expiration_time INTEGER,
    PRIMARY KEY (client_id, id)
)
"""

CREATE_CLIENT_TAG_INDEX_SQL = f"""
CREATE UNIQUE INDEX IF NOT EXISTS {CLIENT_TAG_INDEX_NAME}
ON {TABLE_NAME} (client_id, client_defined_unique_tag)
WHERE client_defined_unique_tag IS NOT NULL
"""

INSERT_ENTITY_SQL = (
    f"INSERT INTO {TABLE_NAME} ({', '.join(SYNC_ENTITY_COLUMNS)}) "
    f"VALUES ({', '.join(f':{column}' for column in SYNC_ENTITY_COLUMNS)})"
)

SELECT_STORED_TAG_SQL = f"""
SELECT client_defined_unique_tag FROM {TABLE_NAME}
WHERE client_id = :client_id AND id = :id AND version = :old_version
"""

# Only the columns a client may change after creation; ctime, originator and tags stay put
UPDATE_ENTITY_SQL = f"""
UPDATE {TABLE_NAME}
SET version = :version,
    mtime = :mtime,
    specifics = :specifics,
    data_type_mtime = :data_type_mtime,
    unique_position = :unique_position,
    parent_id = :parent_id,
    name = :name,
    non_unique_name = :non_unique_name,
    deleted = :deleted,
    folder = :folder,
    expiration_time = :expiration_time,
    client_defined_unique_tag = CASE WHEN :release_tag THEN NULL ELSE client_defined_unique_tag END
WHERE client_id = :client_id AND id = :id AND version = :old_version
"""

# Rows that are real sync entities rather than tag items or the disabled chain marker
ENTITY_CONDITION = f"NOT ({TAG_ID_CONDITION}) AND id != '{DISABLED_CHAIN_ID}'"


class SQLiteDatastore(Datastore):
    """
    A SQLite-based implementation of the `Datastore` interface.

    Every mutating operation runs inside a single transaction opened on the
    injected `SQLiteConnection` handle, so a call is either applied entirely or
    not at all.

    Attributes:
        datastore_name (str): The name of the datastore ("sqlite").
        connection (SQLiteConnection): The shared storage handle.

    Methods:
        close: Close the storage handle.
        get_version: Query SQLite for the current version.
        create_schema: Create the table and the client tag index if absent.
        insert_sync_entity: Insert one entity and its client tag item.
        insert_sync_entities_with_server_tags: Insert a batch all-or-nothing.
        update_sync_entity: Compare-and-swap update with tombstone cascade.
        get_updates_for_type: Page through changed entities of a data type.
        has_server_defined_unique_tag: Check whether a server tag is reserved.
        get_client_item_count: Count every row stored for a client.
        update_client_item_count: Accept a client item count.
        clear_server_data: Tombstone every entity of a client and release its tags.
        disable_sync_chain: Store the disabled chain marker for a client.
        is_sync_chain_disabled: Check for the disabled chain marker.
        scan_sync_entities: Read every sync entity, optionally for one client.
        scan_tag_items: Read every tag item, optionally for one client.
    """

    def __init__(self, connection: SQLiteConnection = None, db_path: str = None, timeout: float = None):
        """
        Initialize the `SQLiteDatastore` with the storage handle it will use.

        Args:
            connection: The SQLite storage handle shared by every operation. When
                omitted, a new handle is opened from `db_path` and `timeout`.
            db_path: Path to the database file, used when no handle is given.
            timeout: Seconds to wait on a locked database, used when no handle is given.
        """
        super().__init__("sqlite")
        if connection is None:
            connection = SQLiteConnection(db_path=db_path, timeout=timeout)
        self.connection: SQLiteConnection = connection

    def close(self):
        """
        Close the storage handle.
        """
        self.connection.close()

    def get_version(self) -> str:
        """
        Query SQLite for the current version.

        Returns:
            The SQLite version string.
        """
        return self.connection.execute_in_transaction(
            lambda conn: conn.execute("SELECT sqlite_version()").fetchone()[0], immediate=False
        )

    def create_schema(self):
        """
        Create the `sync_entities` table and its partial client tag index if they
        don't exist. Safe to call on every start.
        """
        with self.connection.transaction() as conn:
            conn.execute(CREATE_TABLE_SQL)
            conn.execute(CREATE_CLIENT_TAG_INDEX_SQL)
        LOG.info(f"Ensured table '{TABLE_NAME}' exists in '{self.connection.db_path}'.")

    @staticmethod
    def _entity_row(entity: SyncEntity) -> Dict:
        """
        Serialize an entity for insertion. A tombstone never holds a client tag.

        Args:
            entity: The entity to serialize.

        Returns:
            The column values of the main row.
        """
        row = serialize_entity(entity)
        if entity.deleted:
            row["client_defined_unique_tag"] = None
        return row

    def _insert_entity(self, conn: sqlite3.Connection, entity: SyncEntity):
        """
        Insert the main row of an entity and, for a live entity, its client tag item.

        Args:
            conn: The connection of the open transaction.
            entity: The entity to insert.
        """
        row = self._entity_row(entity)
        conn.execute(INSERT_ENTITY_SQL, row)

        client_tag = row["client_defined_unique_tag"]
        if client_tag is not None:
            shadow_tags.insert_tag(conn, entity.client_id, client_tag_id(client_tag))

    def insert_sync_entity(self, entity: SyncEntity) -> bool:
        """
        Insert a new entity, reserving its client defined unique tag if it has one.

        The main row and the tag item are written in one transaction: if either
        collides, neither is stored.

        Args:
            entity: The entity to insert.

        Returns:
            True if the entity ID or its client tag already exists for the client,
            False if the entity was stored.

        Raises:
            MissingIdentifierError: If the entity lacks a client ID or ID.
            DatastoreError: For any failure other than a uniqueness collision.
        """
        validate_identifiers(entity)

        try:
            with self.connection.transaction() as conn:
                self._insert_entity(conn, entity)
        except ConstraintConflictError as exc:
            LOG.info(f"Conflict inserting entity '{entity.id}' for client '{entity.client_id}': {exc}")
            return True

        LOG.debug(f"Inserted entity '{entity.id}' for client '{entity.client_id}'.")
        return False

    def insert_sync_entities_with_server_tags(self, entities: List[SyncEntity]) -> bool:
        """
        Insert a batch of entities in one transaction, reserving their server tags.

        Entities are processed in order. Before inserting an entity that carries a
        server defined unique tag, the tag item is looked up; the first tag that
        already exists aborts the whole batch. A collision on an entity ID or a
        client tag aborts the batch too. Either every entity is stored or none is.

        Args:
            entities: The entities to insert.

        Returns:
            True if the batch was aborted because of a collision, False if every
            entity was stored.

        Raises:
            MissingIdentifierError: If any entity lacks a client ID or ID.
            DatastoreError: For any failure other than a uniqueness collision.
        """
        if not entities:
            return False

        for entity in entities:
            validate_identifiers(entity)

        try:
            with self.connection.transaction() as conn:
                for entity in entities:
                    server_tag = entity.server_defined_unique_tag
                    if server_tag is not None:
                        if shadow_tags.tag_exists(conn, entity.client_id, server_tag_id(server_tag)):
                            raise ServerTagConflictError(entity.client_id, server_tag)

                    self._insert_entity(conn, entity)

                    if server_tag is not None:
                        shadow_tags.insert_tag(conn, entity.client_id, server_tag_id(server_tag))
        except ConstraintConflictError as exc:
            LOG.info(f"Aborted insert of {len(entities)} entities with server tags: {exc}")
            return True

        LOG.debug(f"Inserted {len(entities)} entities with server tags.")
        return False

    def update_sync_entity(self, entity: SyncEntity, old_version: int) -> Tuple[bool, bool]:
        """
        Update an entity only if its stored version equals `old_version`.

        The stored version becomes `entity.version` when that is newer than
        `old_version`, and `old_version + 1` otherwise; `entity.version` is set to
        the stored value on success. When the update tombstones an entity, the
        client defined unique tag stored on the row is cleared and its tag item is
        deleted in the same transaction. The tag sent on `entity` is not used.

        Args:
            entity: The new state of the entity.
            old_version: The version the caller expects to be stored.

        Returns:
            A tuple `(conflict, deleted)`. `conflict` is True when no row matched
            `old_version`; `deleted` is True when a tag item was deleted.

        Raises:
            MissingIdentifierError: If the entity lacks a client ID or ID.
            ValueError: If `old_version` is None.
            DatastoreError: For any storage failure.
        """
        validate_identifiers(entity)
        if old_version is None:
            raise ValueError(f"An expected version is required to update entity '{entity.id}'.")

        new_version = entity.version if entity.version is not None and entity.version > old_version else old_version + 1
        params = serialize_entity(entity)
        params.update({"version": new_version, "old_version": old_version})

        tag_released = False
        with self.connection.transaction() as conn:
            stored = conn.execute(SELECT_STORED_TAG_SQL, params).fetchone()
            if stored is None:
                LOG.info(
                    f"Version conflict updating entity '{entity.id}' for client '{entity.client_id}': "
                    f"expected version {old_version}."
                )
                return True, False

            # The tag to release is the stored one, whatever the caller sent
            stored_tag = stored["client_defined_unique_tag"]
            release_tag = bool(entity.deleted) and stored_tag is not None
            params["release_tag"] = int(release_tag)
            conn.execute(UPDATE_ENTITY_SQL, params)

            if release_tag:
                tag_released = shadow_tags.delete_tag(conn, entity.client_id, client_tag_id(stored_tag))

        entity.version = new_version
        LOG.debug(f"Updated entity '{entity.id}' for client '{entity.client_id}' to version {new_version}.")
        return False, tag_released

    def get_updates_for_type(
        self, data_type: int, client_token: int, fetch_folders: bool, client_id: str, max_size: int
    ) -> Tuple[bool, List[SyncEntity]]:
        """
        Get the entities of a data type modified after `client_token`.

        Expired entities are skipped. Results are ordered by mtime so the mtime of
        the last entity can be used as the next `client_token`.

        Args:
            data_type: The data type to query.
            client_token: Only entities with an mtime greater than this are returned.
            fetch_folders: If False, folders are left out.
            client_id: The client whose entities are queried.
            max_size: The maximum number of entities to return.

        Returns:
            A tuple `(has_changes_remaining, entities)`.

        Raises:
            MissingIdentifierError: If `client_id` is empty.
            ValueError: If `max_size` isn't positive.
        """
        validate_client_id(client_id)
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}.")

        query = (
            f"SELECT * FROM {TABLE_NAME} "
            "WHERE client_id = :client_id AND data_type = :data_type AND mtime > :client_token "
            "AND (expiration_time IS NULL OR expiration_time > :now)"
        )
        if not fetch_folders:
            query += " AND (folder IS NULL OR folder = 0)"
        query += " ORDER BY mtime, id LIMIT :limit"

        params = {
            "client_id": client_id,
            "data_type": data_type,
            "client_token": client_token,
            "now": now_in_milliseconds(),
            "limit": max_size + 1,
        }
        rows = self.connection.execute_in_transaction(
            lambda conn: conn.execute(query, params).fetchall(), immediate=False
        )

        has_changes_remaining = len(rows) > max_size
        entities = deserialize_rows(rows[:max_size], SyncEntity)
        LOG.debug(
            f"Fetched {len(entities)} updates of type {data_type} for client '{client_id}' "
            f"(more remaining: {has_changes_remaining})."
        )
        return has_changes_remaining, entities

    def has_server_defined_unique_tag(self, client_id: str, tag: str) -> bool:
        """
        Check whether a server defined unique tag is reserved for a client.

        Args:
            client_id: The client to check.
            tag: The server tag.

        Returns:
            True if the tag item exists.
        """
        validate_client_id(client_id)
        return self.connection.execute_in_transaction(
            lambda conn: shadow_tags.tag_exists(conn, client_id, server_tag_id(tag)), immediate=False
        )

    def get_client_item_count(self, client_id: str) -> int:
        """
        Count every row stored for a client: entities, tag items and markers.

        Args:
            client_id: The client to count.

        Returns:
            The number of rows.
        """
        validate_client_id(client_id)
        return self.connection.execute_in_transaction(
            lambda conn: conn.execute(
                f"SELECT COUNT(*) FROM {TABLE_NAME} WHERE client_id = :client_id", {"client_id": client_id}
            ).fetchone()[0],
            immediate=False,
        )

    def update_client_item_count(self, client_id: str, count: int):
        """
        Accept a new item count for a client.

        Item counts are derived from the rows of `sync_entities`, so there is
        nothing to store; the call only validates its arguments.

        Args:
            client_id: The client to update.
            count: The new item count.

        Raises:
            ValueError: If `count` is negative.
        """
        validate_client_id(client_id)
        if count < 0:
            raise ValueError(f"Item count for client '{client_id}' can't be negative, got {count}.")
        LOG.debug(f"Item count for client '{client_id}' is derived from stored rows; ignoring {count}.")

    def clear_server_data(self, client_id: str) -> List[SyncEntity]:
        """
        Tombstone every live entity of a client and release all of its tags.

        Main rows are kept; each retired entity gets `deleted = True`, a bumped
        version and a fresh mtime. Every client and server tag item of the client
        is deleted in the same transaction.

        Args:
            client_id: The client to clear.

        Returns:
            The entities that were tombstoned, in their new state.
        """
        validate_client_id(client_id)
        now = now_in_milliseconds()
        live_condition = f"client_id = :client_id AND {ENTITY_CONDITION} AND (deleted IS NULL OR deleted = 0)"

        with self.connection.transaction() as conn:
            rows = conn.execute(
                f"SELECT * FROM {TABLE_NAME} WHERE {live_condition} ORDER BY id", {"client_id": client_id}
            ).fetchall()
            conn.execute(
                f"UPDATE {TABLE_NAME} SET deleted = 1, version = COALESCE(version, 0) + 1, mtime = :now, "
                f"client_defined_unique_tag = NULL WHERE {live_condition}",
                {"client_id": client_id, "now": now},
            )
            released = shadow_tags.delete_all_tags(conn, client_id)

        entities = deserialize_rows(rows, SyncEntity)
        for entity in entities:
            entity.deleted = True
            entity.version = (entity.version or 0) + 1
            entity.mtime = now
            entity.client_defined_unique_tag = None

        LOG.info(f"Cleared {len(entities)} entities and {released} tag items for client '{client_id}'.")
        return entities

    def disable_sync_chain(self, client_id: str):
        """
        Store the disabled chain marker for a client. Calling this twice is harmless.

        Args:
            client_id: The client to disable.
        """
        validate_client_id(client_id)
        now = now_in_milliseconds()
        with self.connection.transaction() as conn:
            conn.execute(
                f"INSERT OR IGNORE INTO {TABLE_NAME} (client_id, id, mtime, ctime) "
                "VALUES (:client_id, :id, :mtime, :ctime)",
                {"client_id": client_id, "id": DISABLED_CHAIN_ID, "mtime": now, "ctime": now},
            )
        LOG.info(f"Disabled sync chain for client '{client_id}'.")

    def is_sync_chain_disabled(self, client_id: str) -> bool:
        """
        Check whether the disabled chain marker exists for a client.

        Args:
            client_id: The client to check.

        Returns:
            True if the sync chain is disabled.
        """
        validate_client_id(client_id)
        return self.connection.execute_in_transaction(
            lambda conn: conn.execute(
                f"SELECT 1 FROM {TABLE_NAME} WHERE client_id = :client_id AND id = :id",
                {"client_id": client_id, "id": DISABLED_CHAIN_ID},
            ).fetchone()
            is not None,
            immediate=False,
        )

    def scan_sync_entities(self, client_id: Optional[str] = None) -> List[SyncEntity]:
        """
        Read every sync entity, leaving out tag items and markers.

        Args:
            client_id: If given, only this client's entities are returned.

        Returns:
            A list of entities ordered by client and ID.
        """
        query = f"SELECT * FROM {TABLE_NAME} WHERE {ENTITY_CONDITION}"
        params = {}
        if client_id is not None:
            query += " AND client_id = :client_id"
            params["client_id"] = client_id
        query += " ORDER BY client_id, id"

        rows = self.connection.execute_in_transaction(
            lambda conn: conn.execute(query, params).fetchall(), immediate=False
        )
        return deserialize_rows(rows, SyncEntity)

    def scan_tag_items(self, client_id: Optional[str] = None) -> List[TagItem]:
        """
        Read every tag item.

        Args:
            client_id: If given, only this client's tag items are returned.

        Returns:
            A list of tag items ordered by client and ID.
        """
        return self.connection.execute_in_transaction(
            lambda conn: shadow_tags.list_tags(conn, client_id), immediate=False
        )
