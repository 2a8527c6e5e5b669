##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the `litesync/utils.py` module.
"""

from types import SimpleNamespace

import pytest
import yaml

from litesync.utils import get_yaml_var, load_yaml, nested_dict_to_namespaces


def test_load_yaml(tmp_path):
    """
    Test that a YAML file is read safely.

    Args:
        tmp_path: PyTest temporary path fixture.
    """
    yaml_path = tmp_path / "app.yaml"
    yaml_path.write_text(yaml.dump({"datastore": {"timeout": 2.0}}))

    assert load_yaml(str(yaml_path)) == {"datastore": {"timeout": 2.0}}


@pytest.mark.parametrize(
    "entry, expected",
    [
        ({"level": "DEBUG"}, "DEBUG"),
        (SimpleNamespace(level="DEBUG"), "DEBUG"),
        ({}, "INFO"),
        (SimpleNamespace(), "INFO"),
        (None, "INFO"),
    ],
)
def test_get_yaml_var(entry, expected: str):
    """
    Test that values are looked up in dictionaries and namespaces with a default.

    Args:
        entry: The section to look in.
        expected: The expected value.
    """
    assert get_yaml_var(entry, "level", "INFO") == expected


def test_nested_dict_to_namespaces():
    """
    Test that nested dictionaries convert to nested namespaces.
    """
    namespaces = nested_dict_to_namespaces({"datastore": {"type": "sqlite", "options": {"wal": True}}})

    assert namespaces.datastore.options.wal is True
    assert namespaces.datastore.type == "sqlite"


def test_nested_dict_to_namespaces_rejects_non_dict():
    """
    Test that only dictionaries can be converted.
    """
    with pytest.raises(TypeError):
        nested_dict_to_namespaces(["not", "a", "dict"])
