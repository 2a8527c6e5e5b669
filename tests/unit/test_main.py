##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Tests for the `main.py` module.
"""

import sys

import pytest
from pytest_mock import MockerFixture

from litesync import main as main_module
from litesync.config import Config, configfile


class TestMain:
    """
    Tests for the `main` entry point of the CLI.
    """

    def test_no_arguments_prints_help(self, mocker: MockerFixture):
        """
        Test that running without arguments prints the help and returns 1.

        Args:
            mocker: PyTest mocker fixture.
        """
        mocker.patch.object(sys, "argv", ["litesync"])
        mock_setup_logging = mocker.patch("litesync.main.setup_logging")

        assert main_module.main() == 1
        mock_setup_logging.assert_not_called()

    def test_successful_command(self, mocker: MockerFixture, db_file_path: str):
        """
        Test that a successful command exits cleanly with logging set from the arguments.

        Args:
            mocker: PyTest mocker fixture.
            db_file_path: The path to a temporary database file.
        """
        mocker.patch.object(sys, "argv", ["litesync", "-lvl", "debug", "database", "-d", db_file_path, "init"])
        mock_setup_logging = mocker.patch("litesync.main.setup_logging")

        with pytest.raises(SystemExit) as excinfo:
            main_module.main()

        assert excinfo.value.code is None
        mock_setup_logging.assert_called_once_with(logger=main_module.LOG, log_level="DEBUG", colors=True)

    def test_level_from_config(self, mocker: MockerFixture, db_file_path: str):
        """
        Test that the configured log level and colors apply when no level is given.

        Args:
            mocker: PyTest mocker fixture.
            db_file_path: The path to a temporary database file.
        """
        configfile.CONFIG = Config({"datastore": {}, "logging": {"level": "warning", "colors": False}})
        mocker.patch.object(sys, "argv", ["litesync", "database", "-d", db_file_path, "init"])
        mock_setup_logging = mocker.patch("litesync.main.setup_logging")

        with pytest.raises(SystemExit):
            main_module.main()

        mock_setup_logging.assert_called_once_with(logger=main_module.LOG, log_level="WARNING", colors=False)

    def test_failing_command_exits_1(self, mocker: MockerFixture):
        """
        Test that an exception raised by a command is logged and turned into exit code 1.

        Args:
            mocker: PyTest mocker fixture.
        """
        mocker.patch.object(sys, "argv", ["litesync", "database", "count", "client1"])
        mocker.patch("litesync.main.setup_logging")
        mocker.patch(
            "litesync.cli.commands.database.count.open_datastore", side_effect=RuntimeError("database unavailable")
        )
        mock_log = mocker.patch.object(main_module, "LOG")

        with pytest.raises(SystemExit) as excinfo:
            main_module.main()

        assert excinfo.value.code == 1
        mock_log.error.assert_called_once_with("database unavailable")
