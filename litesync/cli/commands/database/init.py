##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module defines the `DatabaseInitCommand` class, which implements the
`database init` subcommand for the litesync CLI.
"""

import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from litesync.cli.commands.command_entry_point import CommandEntryPoint
from litesync.cli.utils import open_datastore


LOG = logging.getLogger(__name__)


class DatabaseInitCommand(CommandEntryPoint):
    """
    Handles the `database init` subcommand, which creates the schema.

    Methods:
        add_parser: Adds the `database init` command to the CLI parser.
        process_command: Creates the table and index if they don't exist.
    """

    def add_parser(self, database_commands: ArgumentParser):  # pylint: disable=arguments-renamed
        """
        Add the `database init` subcommand parser to the CLI argument parser.

        Parameters:
            database_commands (ArgumentParser): The subparsers object to which the `database init`
                subcommand parser will be added.
        """
        parser = database_commands.add_parser(
            "init",
            help="Create the database schema if it doesn't exist.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        parser.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        Create the database schema.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        # Opening the datastore creates the schema
        with open_datastore(args.db) as datastore:
            LOG.info(f"Database at '{datastore.connection.db_path}' is ready.")
