##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module provides functionality for locating, loading and defaulting the
litesync application configuration file (`app.yaml`).

It houses the `CONFIG` object that's used throughout litesync's codebase.
"""
import logging
import os
from typing import Dict, Optional

from litesync.config import Config
from litesync.config.config_filepaths import APP_FILENAME, CONFIG_PATH_FILE, DEFAULT_DB_PATH, LITESYNC_HOME
from litesync.utils import load_yaml


LOG: logging.Logger = logging.getLogger(__name__)

CONFIG: Optional[Config] = None


def load_config(filepath: str) -> Dict:
    """
    Reads a litesync YAML configuration file and returns its contents as a dictionary.

    Args:
        filepath: The path to the YAML configuration file.

    Returns:
        A dictionary containing the contents of the YAML file or None if file doesn't exist.
    """
    if not os.path.isfile(filepath):
        LOG.info(f"No app config file at {filepath}")
        return None
    LOG.info(f"Reading app config from file {filepath}")
    return load_yaml(filepath) or {}


def find_config_file(path: str = None) -> str:
    """
    Locate the litesync application configuration file (`app.yaml`).

    If no directory is provided, the following locations are checked in order:
      1. `app.yaml` in the current working directory.
      2. The file named by `CONFIG_PATH_FILE`, if it points to a valid config file.
      3. `app.yaml` in the `LITESYNC_HOME` directory.

    If a `path` is explicitly provided, only that directory is checked.

    Args:
        path: A specific directory to look for `app.yaml`.

    Returns:
        The full path to the `app.yaml` file if found, otherwise `None`.
    """
    if path is None:
        local_app = os.path.join(os.getcwd(), APP_FILENAME)
        if os.path.isfile(local_app):
            return local_app

        if os.path.isfile(CONFIG_PATH_FILE):
            with open(CONFIG_PATH_FILE, "r") as f:
                config_path = f.read().strip()
            if os.path.isfile(config_path):
                return config_path

        path_app = os.path.join(LITESYNC_HOME, APP_FILENAME)
        if os.path.isfile(path_app):
            return path_app

        return None

    app_path = os.path.join(path, APP_FILENAME)
    if os.path.exists(app_path):
        return app_path

    return None


def get_default_config() -> Dict:
    """
    Creates the default configuration used when no `app.yaml` can be found.

    Returns:
        A configuration dictionary with every setting litesync reads.
    """
    return {
        "datastore": {"type": "sqlite", "path": DEFAULT_DB_PATH, "timeout": 5.0},
        "logging": {"level": "INFO", "colors": True},
    }


def load_defaults(config: Dict):
    """
    Fill in any missing section or setting of `config` from `get_default_config`.

    Args:
        config: The configuration dictionary to be updated in place.
    """
    for section, defaults in get_default_config().items():
        if not isinstance(config.get(section), dict):
            config[section] = {}
        for key, value in defaults.items():
            config[section].setdefault(key, value)


def get_config(path: Optional[str] = None) -> Dict:
    """
    Loads a litesync configuration file and returns a dictionary containing the configuration data.

    Args:
        path: The directory path to search for the configuration file.
            If `None`, default search paths are used.

    Returns:
        A dictionary containing all the configuration data with defaults applied.

    Raises:
        ValueError: If the configuration file cannot be found.
    """
    filepath: Optional[str] = find_config_file(path)
    if filepath is None:
        raise ValueError(f"Cannot find a litesync config file! Create '{os.path.join(LITESYNC_HOME, APP_FILENAME)}'")
    config: Dict = load_config(filepath)
    load_defaults(config)
    return config


def default_config_info() -> Dict:
    """
    Returns information about litesync's configuration locations.

    Returns:
        A dictionary containing the following keys:\n
            - `config_file` (str): Path to the litesync configuration file.
            - `litesync_home` (str): Path to the litesync home directory.
            - `litesync_home_exists` (bool): True if the litesync home directory exists.
    """
    return {
        "config_file": find_config_file(),
        "litesync_home": LITESYNC_HOME,
        "litesync_home_exists": os.path.exists(LITESYNC_HOME),
    }


def initialize_config(path: Optional[str] = None) -> Config:
    """
    Initializes and returns the litesync configuration.

    Falls back to the default configuration when no file can be found.

    Args:
        path: Path to look for configuration file.

    Returns:
        The initialized configuration object.
    """
    global CONFIG  # pylint: disable=global-statement

    try:
        app_config = get_config(path)
        CONFIG = Config(app_config)
    except ValueError as e:
        LOG.debug(f"{e} Falling back to default configuration.")
        CONFIG = Config(get_default_config())

    return CONFIG


initialize_config()
