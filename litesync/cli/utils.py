##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Utility functions shared by the litesync CLI commands.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from litesync.datastore.datastore_base import Datastore
from litesync.datastore.datastore_factory import get_datastore


LOG = logging.getLogger(__name__)


@contextmanager
def open_datastore(db_path: str = None) -> Iterator[Datastore]:
    """
    Open the configured datastore for the duration of a command.

    The schema is created if needed and the datastore is closed on exit.

    Args:
        db_path: Path to the database. Defaults to the configured path.

    Yields:
        The opened datastore.
    """
    datastore = get_datastore(db_path=db_path)
    try:
        yield datastore
    finally:
        datastore.close()
