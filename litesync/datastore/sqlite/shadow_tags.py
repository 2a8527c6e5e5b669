##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Shadow tag rows for the SQLite datastore.

A key-value sync backend makes a tag unique with a conditional put on a separate
item. Here the same idea is expressed as a synthetic row in `sync_entities`
whose `id` is the tag with a kind prefix ("Client#" or "Server#"). The
`(client_id, id)` primary key then reserves the tag for the client. Every
function in this module takes the connection of an already open transaction so
that a shadow row is always written or removed together with its owning entity.
"""

import logging
import sqlite3
from typing import List, Optional

from litesync.datastore.data_models import TagItem
from litesync.datastore.utils import deserialize_rows, now_in_milliseconds


LOG = logging.getLogger(__name__)

TABLE_NAME = "sync_entities"
CLIENT_TAG_PREFIX = "Client#"
SERVER_TAG_PREFIX = "Server#"
TAG_PREFIXES = (CLIENT_TAG_PREFIX, SERVER_TAG_PREFIX)
TAG_PREFIX_LENGTH = len(CLIENT_TAG_PREFIX)

# Both prefixes have the same length so one substr() covers them
TAG_ID_CONDITION = f"substr(id, 1, {TAG_PREFIX_LENGTH}) IN ('{CLIENT_TAG_PREFIX}', '{SERVER_TAG_PREFIX}')"


def client_tag_id(tag: str) -> str:
    """
    Build the shadow row ID for a client defined unique tag.

    Args:
        tag: The tag value.

    Returns:
        The shadow row ID.
    """
    return f"{CLIENT_TAG_PREFIX}{tag}"


def server_tag_id(tag: str) -> str:
    """
    Build the shadow row ID for a server defined unique tag.

    Args:
        tag: The tag value.

    Returns:
        The shadow row ID.
    """
    return f"{SERVER_TAG_PREFIX}{tag}"


def is_tag_item_id(item_id: str) -> bool:
    """
    Determine whether a row ID belongs to a shadow tag row.

    Args:
        item_id: The `id` column of a row.

    Returns:
        True if `item_id` starts with a tag prefix.
    """
    return bool(item_id) and item_id.startswith(TAG_PREFIXES)


def insert_tag(conn: sqlite3.Connection, client_id: str, tag_id: str, timestamp: Optional[int] = None):
    """
    Reserve a tag for a client by inserting its shadow row.

    A duplicate raises `sqlite3.IntegrityError` from the primary key, which the
    surrounding transaction classifies as a conflict.

    Args:
        conn: The connection of the open transaction.
        client_id: The client reserving the tag.
        tag_id: The shadow row ID built by `client_tag_id` or `server_tag_id`.
        timestamp: mtime and ctime of the shadow row. Defaults to now.
    """
    timestamp = now_in_milliseconds() if timestamp is None else timestamp
    LOG.debug(f"Inserting tag item '{tag_id}' for client '{client_id}'.")
    conn.execute(
        f"INSERT INTO {TABLE_NAME} (client_id, id, mtime, ctime) VALUES (:client_id, :id, :mtime, :ctime)",
        {"client_id": client_id, "id": tag_id, "mtime": timestamp, "ctime": timestamp},
    )


def tag_exists(conn: sqlite3.Connection, client_id: str, tag_id: str) -> bool:
    """
    Check whether a shadow row exists for a client.

    Args:
        conn: The connection to query.
        client_id: The client to check.
        tag_id: The shadow row ID.

    Returns:
        True if the shadow row exists.
    """
    cursor = conn.execute(
        f"SELECT 1 FROM {TABLE_NAME} WHERE client_id = :client_id AND id = :id",
        {"client_id": client_id, "id": tag_id},
    )
    return cursor.fetchone() is not None


def delete_tag(conn: sqlite3.Connection, client_id: str, tag_id: str) -> bool:
    """
    Release a tag by deleting its shadow row.

    Args:
        conn: The connection of the open transaction.
        client_id: The client owning the tag.
        tag_id: The shadow row ID.

    Returns:
        True if a shadow row was deleted.
    """
    cursor = conn.execute(
        f"DELETE FROM {TABLE_NAME} WHERE client_id = :client_id AND id = :id",
        {"client_id": client_id, "id": tag_id},
    )
    if cursor.rowcount == 0:
        LOG.debug(f"No tag item '{tag_id}' to delete for client '{client_id}'.")
        return False
    LOG.debug(f"Deleted tag item '{tag_id}' for client '{client_id}'.")
    return True


def delete_all_tags(conn: sqlite3.Connection, client_id: str) -> int:
    """
    Release every client and server tag of a client.

    Args:
        conn: The connection of the open transaction.
        client_id: The client whose tags are released.

    Returns:
        The number of shadow rows deleted.
    """
    cursor = conn.execute(
        f"DELETE FROM {TABLE_NAME} WHERE client_id = :client_id AND {TAG_ID_CONDITION}",
        {"client_id": client_id},
    )
    LOG.debug(f"Deleted {cursor.rowcount} tag items for client '{client_id}'.")
    return cursor.rowcount


def list_tags(conn: sqlite3.Connection, client_id: Optional[str] = None) -> List[TagItem]:
    """
    List shadow rows, optionally restricted to one client.

    Args:
        conn: The connection to query.
        client_id: If given, only this client's shadow rows are returned.

    Returns:
        A list of `TagItem` objects ordered by client and ID.
    """
    query = f"SELECT client_id, id, mtime, ctime FROM {TABLE_NAME} WHERE {TAG_ID_CONDITION}"
    params = {}
    if client_id is not None:
        query += " AND client_id = :client_id"
        params["client_id"] = client_id
    query += " ORDER BY client_id, id"

    return deserialize_rows(conn.execute(query, params).fetchall(), TagItem)
