##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module houses dataclasses that define the format of the data
that's stored in litesync's database.
"""

import logging
from dataclasses import Field, asdict, dataclass
from dataclasses import fields as dataclass_fields
from typing import Dict, Optional, Tuple, Type, TypeVar


LOG = logging.getLogger(__name__)
T = TypeVar("T", bound="BaseDataModel")


@dataclass
class BaseDataModel:
    """
    A base class for dataclasses that provides common conversion helpers.

    Methods:
        to_dict:
            Convert the dataclass instance to a dictionary.

        from_dict (classmethod):
            Create an instance of the dataclass from a dictionary, ignoring unknown keys.

        get_instance_fields:
            Retrieve the fields associated with this dataclass instance.

        get_class_fields (classmethod):
            Retrieve the fields associated with the dataclass class itself.
    """

    def to_dict(self) -> Dict:
        """
        Convert the dataclass to a dictionary.

        Returns:
            The dataclass as a dictionary.
        """
        return asdict(self)

    @classmethod
    def from_dict(cls: Type[T], data: Dict) -> T:
        """
        Create an instance of the dataclass from a dictionary.

        Keys that don't correspond to a field are dropped with a warning.

        Args:
            data: A dictionary to turn into an instance of this dataclass.

        Returns:
            An instance of the dataclass that called this.
        """
        field_names = {field_obj.name for field_obj in cls.get_class_fields()}
        unknown = set(data) - field_names
        if unknown:
            LOG.warning(f"Ignoring unknown fields for {cls.__name__}: {sorted(unknown)}")
        return cls(**{key: val for key, val in data.items() if key in field_names})

    def get_instance_fields(self) -> Tuple[Field]:
        """
        Get the fields associated with this instance.

        Returns:
            A tuple of dataclass.Field objects representing the fields in this data class.
        """
        return dataclass_fields(self)

    @classmethod
    def get_class_fields(cls) -> Tuple[Field]:
        """
        Get the fields associated with this object.

        Returns:
            A tuple of dataclass.Field objects representing the fields in this data class.
        """
        return dataclass_fields(cls)


@dataclass
class SyncEntity(BaseDataModel):  # pylint: disable=too-many-instance-attributes
    """
    A dataclass to store one user data item tracked by the sync protocol.

    The field order matches the column order of the `sync_entities` table.

    Attributes:
        client_id (str): The ID of the sync chain client owning this entity.
        id (str): The ID of the entity. Unique together with `client_id`.
        parent_id (Optional[str]): The ID of the parent entity, if any.
        version (Optional[int]): The version used for optimistic concurrency.
        mtime (Optional[int]): Modification time in milliseconds.
        ctime (Optional[int]): Creation time in milliseconds.
        name (Optional[str]): Display name.
        non_unique_name (Optional[str]): Non-unique display name.
        server_defined_unique_tag (Optional[str]): Tag reserved by the server for this client.
        deleted (Optional[bool]): Tombstone flag.
        originator_cache_guid (Optional[str]): Cache GUID of the originating client.
        originator_client_item_id (Optional[str]): Item ID on the originating client.
        specifics (Optional[bytes]): Opaque payload.
        data_type (Optional[int]): The kind of payload in `specifics`.
        folder (Optional[bool]): Whether this entity is a folder.
        client_defined_unique_tag (Optional[str]): Tag unique per client among live entities.
        unique_position (Optional[bytes]): Opaque ordering token.
        data_type_mtime (Optional[str]): Data type and mtime joined with "#".
        expiration_time (Optional[int]): Expiration time in milliseconds.
    """

    client_id: str = None
    id: str = None  # pylint: disable=invalid-name
    parent_id: Optional[str] = None
    version: Optional[int] = None
    mtime: Optional[int] = None
    ctime: Optional[int] = None
    name: Optional[str] = None
    non_unique_name: Optional[str] = None
    server_defined_unique_tag: Optional[str] = None
    deleted: Optional[bool] = None
    originator_cache_guid: Optional[str] = None
    originator_client_item_id: Optional[str] = None
    specifics: Optional[bytes] = None
    data_type: Optional[int] = None
    folder: Optional[bool] = None
    client_defined_unique_tag: Optional[str] = None
    unique_position: Optional[bytes] = None
    data_type_mtime: Optional[str] = None
    expiration_time: Optional[int] = None


@dataclass
class TagItem(BaseDataModel):
    """
    A dataclass for the synthetic rows that reserve a client or server tag.

    Attributes:
        client_id (str): The ID of the client owning the tag.
        id (str): "Client#" or "Server#" followed by the tag value.
        mtime (Optional[int]): Modification time in milliseconds.
        ctime (Optional[int]): Creation time in milliseconds.
    """

    client_id: str = None
    id: str = None  # pylint: disable=invalid-name
    mtime: Optional[int] = None
    ctime: Optional[int] = None
