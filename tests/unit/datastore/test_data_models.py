##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the `data_models.py` module.
"""

import logging

from _pytest.logging import LogCaptureFixture

from litesync.datastore.data_models import SyncEntity, TagItem


class TestBaseDataModel:
    """
    Tests for the helpers every data model inherits.
    """

    def test_to_dict_and_back(self):
        """
        Test that a model converts to a dictionary and back unchanged.
        """
        entity = SyncEntity(client_id="c", id="i", version=2, specifics=b"\x00")
        assert SyncEntity.from_dict(entity.to_dict()) == entity

    def test_from_dict_drops_unknown_keys(self, caplog: LogCaptureFixture):
        """
        Test that unknown keys are ignored with a warning.

        Args:
            caplog: A built-in fixture from the pytest library to capture logs.
        """
        caplog.set_level(logging.WARNING)

        item = TagItem.from_dict({"client_id": "c", "id": "Client#t", "version": 1})

        assert item == TagItem(client_id="c", id="Client#t")
        assert "version" in caplog.text

    def test_fields(self):
        """
        Test that instance and class fields agree.
        """
        item = TagItem()
        assert [f.name for f in item.get_instance_fields()] == ["client_id", "id", "mtime", "ctime"]
        assert [f.name for f in TagItem.get_class_fields()] == ["client_id", "id", "mtime", "ctime"]

    def test_sync_entity_defaults(self):
        """
        Test that every field of a new entity is unset.
        """
        entity = SyncEntity()
        assert all(value is None for value in entity.to_dict().values())
