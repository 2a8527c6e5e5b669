##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module contains pytest fixtures to be used throughout the entire test suite.
"""
import os
from copy import copy
from glob import glob

import pytest

from litesync.config import configfile
from tests.fixture_types import FixtureModification


# pylint: disable=redefined-outer-name


#######################################
# Loading in Module Specific Fixtures #
#######################################

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))

fixture_glob = os.path.join(TESTS_DIR, "fixtures", "**", "*.py")
pytest_plugins = [
    "tests." + os.path.relpath(fixture_file, TESTS_DIR)[: -len(".py")].replace(os.sep, ".")
    for fixture_file in glob(fixture_glob, recursive=True)
    if not fixture_file.endswith("__init__.py")
]


#######################################
######### Fixture Definitions #########
#######################################


@pytest.fixture(autouse=True)
def config(monkeypatch: pytest.MonkeyPatch) -> FixtureModification:
    """
    Give every test the default configuration and restore the original afterwards.

    `LITESYNC_DB` is unset so a developer's environment can't leak into tests.

    Args:
        monkeypatch: PyTest monkeypatch fixture.
    """
    monkeypatch.delenv("LITESYNC_DB", raising=False)
    original_config = copy(configfile.CONFIG)
    configfile.CONFIG = configfile.Config(configfile.get_default_config())
    yield
    configfile.CONFIG = original_config
