##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module defines the `DatabaseCommand` class, which provides CLI subcommands
for interacting with the litesync SQLite database.
"""

import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from litesync.cli.commands.command_entry_point import CommandEntryPoint
from litesync.cli.commands.database.clear import DatabaseClearCommand
from litesync.cli.commands.database.count import DatabaseCountCommand
from litesync.cli.commands.database.get import DatabaseGetCommand
from litesync.cli.commands.database.info import DatabaseInfoCommand
from litesync.cli.commands.database.init import DatabaseInitCommand


LOG = logging.getLogger(__name__)


class DatabaseCommand(CommandEntryPoint):
    """
    Handles `database` CLI commands for interacting with litesync's database.

    Attributes:
        subcommands (List[CommandEntryPoint]): Handlers for each `database` subcommand.

    Methods:
        add_parser: Adds the `database` command and its subcommands to the CLI parser.
        process_command: Does nothing; each subcommand processes itself.
    """

    def __init__(self):
        """
        Initialize the `DatabaseCommand` instance and its subcommand handlers.
        """
        self.subcommands = [
            DatabaseInitCommand(),
            DatabaseInfoCommand(),
            DatabaseCountCommand(),
            DatabaseGetCommand(),
            DatabaseClearCommand(),
        ]

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `database` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `database` command parser will be added.
        """
        database: ArgumentParser = subparsers.add_parser(
            "database",
            help="Interact with litesync's database.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        database.set_defaults(func=self.process_command)

        database.add_argument(
            "-d",
            "--db",
            type=str,
            default=None,
            help="Path to the SQLite database. Overrides $LITESYNC_DB and app.yaml.",
        )

        database_commands: ArgumentParser = database.add_subparsers(dest="commands", required=True)
        for subcommand in self.subcommands:
            subcommand.add_parser(database_commands)

    def process_command(self, args: Namespace):
        """
        This method doesn't do anything as the subcommands each have logic
        for processing their respective commands.

        Args:
            args: An argparse Namespace containing user arguments.
        """
