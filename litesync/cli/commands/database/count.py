##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module defines the `DatabaseCountCommand` class, which implements the
`database count` subcommand for the litesync CLI.
"""

from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from litesync.cli.commands.command_entry_point import CommandEntryPoint
from litesync.cli.utils import open_datastore


class DatabaseCountCommand(CommandEntryPoint):
    """
    Handles the `database count` subcommand, which prints the number of rows
    stored for a client.

    Methods:
        add_parser: Adds the `database count` command to the CLI parser.
        process_command: Prints the item count of the client.
    """

    def add_parser(self, database_commands: ArgumentParser):  # pylint: disable=arguments-renamed
        """
        Add the `database count` subcommand parser to the CLI argument parser.

        Parameters:
            database_commands (ArgumentParser): The subparsers object to which the `database count`
                subcommand parser will be added.
        """
        parser = database_commands.add_parser(
            "count",
            help="Print the number of items stored for a client.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        parser.set_defaults(func=self.process_command)
        parser.add_argument("client_id", type=str, help="The ID of the client.")

    def process_command(self, args: Namespace):
        """
        Print the item count of a client.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        with open_datastore(args.db) as datastore:
            count = datastore.get_client_item_count(args.client_id)
        print(f"{args.client_id}: {count}")
