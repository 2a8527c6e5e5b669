##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Utility functions for datastores in the litesync application.

These utilities convert in-memory data models into rows the database can store,
convert rows back into data models, and validate entity identifiers before any
storage work is attempted.
"""

import logging
import time
from typing import Any, Dict, Iterable, Type, TypeVar

from litesync.datastore.data_models import BaseDataModel, SyncEntity
from litesync.exceptions import MissingIdentifierError


T = TypeVar("T", bound=BaseDataModel)

LOG = logging.getLogger(__name__)

BOOLEAN_COLUMNS = frozenset({"deleted", "folder"})
BINARY_COLUMNS = frozenset({"specifics", "unique_position"})
SYNC_ENTITY_COLUMNS = tuple(field_obj.name for field_obj in SyncEntity.get_class_fields())


def now_in_milliseconds() -> int:
    """
    Get the current wall clock time in milliseconds since the epoch.

    Returns:
        The current time in milliseconds.
    """
    return time.time_ns() // 1_000_000


def validate_identifiers(entity: SyncEntity):
    """
    Make sure an entity carries both of its primary key components.

    Args:
        entity: The entity to check.

    Raises:
        MissingIdentifierError: If `client_id` or `id` is missing or empty.
    """
    if entity is None:
        raise MissingIdentifierError("A sync entity is required.")
    if not entity.client_id:
        raise MissingIdentifierError(f"Sync entity '{entity.id}' has no client ID.")
    if not entity.id:
        raise MissingIdentifierError(f"Sync entity for client '{entity.client_id}' has no ID.")


def validate_client_id(client_id: str):
    """
    Make sure a client ID was given.

    Args:
        client_id: The client ID to check.

    Raises:
        MissingIdentifierError: If `client_id` is missing or empty.
    """
    if not client_id:
        raise MissingIdentifierError("A client ID is required.")


def serialize_entity(entity: SyncEntity) -> Dict[str, Any]:
    """
    Given a [`SyncEntity`][datastore.data_models.SyncEntity] instance, convert its
    data into column values that SQLite can store.

    Args:
        entity: A [`SyncEntity`][datastore.data_models.SyncEntity] instance.

    Returns:
        A dictionary mapping column names to SQLite values.
    """
    serialized_data = {}

    for field_obj in entity.get_instance_fields():
        value = getattr(entity, field_obj.name)
        if value is not None and field_obj.name in BOOLEAN_COLUMNS:
            value = int(bool(value))
        elif value is not None and field_obj.name in BINARY_COLUMNS:
            value = bytes(value)
        serialized_data[field_obj.name] = value

    return serialized_data


def deserialize_entity(data: Dict[str, Any], model_class: Type[T]) -> T:
    """
    Given a row that was retrieved, convert it into a data model instance.

    Args:
        data: The row retrieved from the database, as a dictionary.
        model_class: A [`BaseDataModel`][datastore.data_models.BaseDataModel] subclass.

    Returns:
        A `model_class` instance.
    """
    deserialized_data = {}

    for key, val in data.items():
        if val is not None and key in BOOLEAN_COLUMNS:
            val = bool(val)
        elif val is not None and key in BINARY_COLUMNS:
            val = bytes(val)
        deserialized_data[key] = val

    return model_class.from_dict(deserialized_data)


def deserialize_rows(rows: Iterable, model_class: Type[T]) -> list:
    """
    Convert every row of a query result into a data model instance.

    Args:
        rows: `sqlite3.Row` objects (or dictionaries).
        model_class: A [`BaseDataModel`][datastore.data_models.BaseDataModel] subclass.

    Returns:
        A list of `model_class` instances.
    """
    return [deserialize_entity(dict(row), model_class) for row in rows]
