##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module resolves the datastore settings from the application configuration
(`app.yaml`), including the datastore type, the SQLite database path and the
connection timeout.
"""

import logging
import os

from litesync.config import configfile
from litesync.config.config_filepaths import DB_PATH_ENV_VAR, DEFAULT_DB_PATH
from litesync.utils import get_yaml_var


LOG = logging.getLogger(__name__)

DATASTORES = ["sqlite"]
DEFAULT_TIMEOUT = 5.0


def get_datastore_type() -> str:
    """
    Get the configured datastore type.

    Returns:
        The lowercase name of the datastore type (e.g. "sqlite").
    """
    datastore_type = get_yaml_var(configfile.CONFIG.datastore, "type", "sqlite")
    return str(datastore_type).lower()


def get_db_path() -> str:
    """
    Get the path to the SQLite database file.

    The `LITESYNC_DB` environment variable takes precedence over the
    configuration file. The special value ":memory:" is returned untouched.

    Returns:
        The database path with `~` expanded.
    """
    db_path = os.environ.get(DB_PATH_ENV_VAR)
    if db_path:
        LOG.debug(f"Datastore: using database path from ${DB_PATH_ENV_VAR}.")
    else:
        db_path = get_yaml_var(configfile.CONFIG.datastore, "path", DEFAULT_DB_PATH)

    if db_path == ":memory:":
        return db_path
    return os.path.expanduser(db_path)


def get_timeout() -> float:
    """
    Get the number of seconds SQLite waits on a locked database before failing.

    Returns:
        The timeout in seconds.
    """
    try:
        return float(get_yaml_var(configfile.CONFIG.datastore, "timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError):
        LOG.warning(f"Datastore: invalid timeout in configuration, using {DEFAULT_TIMEOUT} seconds.")
        return DEFAULT_TIMEOUT
