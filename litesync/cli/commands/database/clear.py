##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Implements the `database clear` subcommand for the litesync CLI.

Every live entity of the client is tombstoned and all of its tags are released.
Rows are never hard-deleted.
"""

import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from litesync.cli.commands.command_entry_point import CommandEntryPoint
from litesync.cli.utils import open_datastore


LOG = logging.getLogger(__name__)


class DatabaseClearCommand(CommandEntryPoint):
    """
    Handles the `database clear` subcommand, which clears the server data of a client.

    Methods:
        add_parser: Adds the `database clear` command to the CLI parser.
        process_command: Tombstones the entities of a client.
    """

    def add_parser(self, database_commands: ArgumentParser):  # pylint: disable=arguments-renamed
        """
        Add the `database clear` subcommand parser to the CLI argument parser.

        Parameters:
            database_commands (ArgumentParser): The subparsers object to which the `database clear`
                subcommand parser will be added.
        """
        parser = database_commands.add_parser(
            "clear",
            help="Tombstone every entity of a client and release its tags.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        parser.set_defaults(func=self.process_command)
        parser.add_argument("client_id", type=str, help="The ID of the client.")

    def process_command(self, args: Namespace):
        """
        Clear the server data of a client.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        with open_datastore(args.db) as datastore:
            cleared = datastore.clear_server_data(args.client_id)
        LOG.info(f"Tombstoned {len(cleared)} entities for client '{args.client_id}'.")
