##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the configfile.py module.
"""

import os

import pytest
import yaml
from pytest_mock import MockerFixture

from litesync.config import Config, configfile
from litesync.config.configfile import (
    default_config_info,
    find_config_file,
    get_config,
    get_default_config,
    initialize_config,
    load_config,
    load_defaults,
)


def _write_app_yaml(directory, contents) -> str:
    """
    Write an `app.yaml` file.

    Args:
        directory: The directory to write it in.
        contents: The dictionary to dump, or None for an empty file.

    Returns:
        The path to the file.
    """
    app_path = os.path.join(str(directory), "app.yaml")
    with open(app_path, "w") as app_file:
        if contents is not None:
            yaml.dump(contents, app_file)
    return app_path


class TestLoadConfig:
    """
    Tests for reading `app.yaml` files.
    """

    def test_missing_file(self, tmp_path):
        """
        Test that a missing file yields None.

        Args:
            tmp_path: PyTest temporary path fixture.
        """
        assert load_config(str(tmp_path / "nope.yaml")) is None

    def test_empty_file(self, tmp_path):
        """
        Test that an empty file yields an empty dictionary.

        Args:
            tmp_path: PyTest temporary path fixture.
        """
        assert load_config(_write_app_yaml(tmp_path, None)) == {}

    def test_reads_contents(self, tmp_path):
        """
        Test that the YAML contents are returned.

        Args:
            tmp_path: PyTest temporary path fixture.
        """
        app_path = _write_app_yaml(tmp_path, {"datastore": {"path": "/data/sync.sqlite"}})
        assert load_config(app_path) == {"datastore": {"path": "/data/sync.sqlite"}}


class TestFindConfigFile:
    """
    Tests for locating `app.yaml`.
    """

    def test_explicit_directory(self, tmp_path):
        """
        Test that only the given directory is searched when one is provided.

        Args:
            tmp_path: PyTest temporary path fixture.
        """
        assert find_config_file(str(tmp_path)) is None
        app_path = _write_app_yaml(tmp_path, {})
        assert find_config_file(str(tmp_path)) == app_path

    def test_current_directory_first(self, tmp_path, monkeypatch: pytest.MonkeyPatch):
        """
        Test that `app.yaml` in the current directory is found first.

        Args:
            tmp_path: PyTest temporary path fixture.
            monkeypatch: PyTest monkeypatch fixture.
        """
        app_path = _write_app_yaml(tmp_path, {})
        monkeypatch.chdir(tmp_path)
        assert find_config_file() == app_path

    def test_config_path_file(self, tmp_path, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch):
        """
        Test that the path stored in the config path file is used next.

        Args:
            tmp_path: PyTest temporary path fixture.
            mocker: PyTest mocker fixture.
            monkeypatch: PyTest monkeypatch fixture.
        """
        work_dir = tmp_path / "work"
        work_dir.mkdir()
        monkeypatch.chdir(work_dir)

        stored_dir = tmp_path / "stored"
        stored_dir.mkdir()
        app_path = _write_app_yaml(stored_dir, {})
        path_file = tmp_path / "config_path.txt"
        path_file.write_text(f"{app_path}\n")
        mocker.patch("litesync.config.configfile.CONFIG_PATH_FILE", str(path_file))
        mocker.patch("litesync.config.configfile.LITESYNC_HOME", str(tmp_path / "home"))

        assert find_config_file() == app_path

    def test_litesync_home_last(self, tmp_path, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch):
        """
        Test that `app.yaml` in the litesync home directory is the last resort.

        Args:
            tmp_path: PyTest temporary path fixture.
            mocker: PyTest mocker fixture.
            monkeypatch: PyTest monkeypatch fixture.
        """
        work_dir = tmp_path / "work"
        work_dir.mkdir()
        monkeypatch.chdir(work_dir)
        mocker.patch("litesync.config.configfile.CONFIG_PATH_FILE", str(tmp_path / "missing.txt"))
        mocker.patch("litesync.config.configfile.LITESYNC_HOME", str(tmp_path))

        assert find_config_file() is None
        app_path = _write_app_yaml(tmp_path, {})
        assert find_config_file() == app_path


class TestDefaults:
    """
    Tests for the default configuration.
    """

    def test_default_config(self):
        """
        Test the default datastore and logging settings.
        """
        defaults = get_default_config()
        assert defaults["datastore"] == {"type": "sqlite", "path": os.path.join(".", "litesync.sqlite"), "timeout": 5.0}
        assert defaults["logging"] == {"level": "INFO", "colors": True}

    def test_load_defaults_keeps_user_values(self):
        """
        Test that user settings win and missing settings are filled in.
        """
        config = {"datastore": {"path": "/data/sync.sqlite"}, "logging": None}

        load_defaults(config)

        assert config["datastore"] == {"path": "/data/sync.sqlite", "type": "sqlite", "timeout": 5.0}
        assert config["logging"] == {"level": "INFO", "colors": True}

    def test_default_config_info(self, mocker: MockerFixture):
        """
        Test that the configuration locations are reported.

        Args:
            mocker: PyTest mocker fixture.
        """
        mocker.patch("litesync.config.configfile.find_config_file", return_value="/some/app.yaml")

        info = default_config_info()

        assert info["config_file"] == "/some/app.yaml"
        assert info["litesync_home"] == configfile.LITESYNC_HOME
        assert isinstance(info["litesync_home_exists"], bool)


class TestInitializeConfig:
    """
    Tests for `get_config` and `initialize_config`.
    """

    def test_get_config_missing(self, tmp_path):
        """
        Test that `get_config` raises when no file can be found.

        Args:
            tmp_path: PyTest temporary path fixture.
        """
        with pytest.raises(ValueError, match="Cannot find a litesync config file"):
            get_config(str(tmp_path))

    def test_initialize_from_file(self, tmp_path):
        """
        Test that `initialize_config` loads a file and sets the global `CONFIG`.

        Args:
            tmp_path: PyTest temporary path fixture.
        """
        _write_app_yaml(tmp_path, {"datastore": {"path": "/data/sync.sqlite", "timeout": 1.5}})

        config = initialize_config(str(tmp_path))

        assert isinstance(config, Config)
        assert configfile.CONFIG is config
        assert config.datastore.path == "/data/sync.sqlite"
        assert config.datastore.timeout == 1.5
        assert config.datastore.type == "sqlite"
        assert config.logging.level == "INFO"

    def test_initialize_falls_back_to_defaults(self, tmp_path):
        """
        Test that the defaults are used when no file exists.

        Args:
            tmp_path: PyTest temporary path fixture.
        """
        config = initialize_config(str(tmp_path))

        assert config.datastore.type == "sqlite"
        assert config.logging.colors is True
