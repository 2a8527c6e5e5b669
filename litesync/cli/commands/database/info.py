##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
This module defines the `DatabaseInfoCommand` class, which implements the
`database info` subcommand for the litesync CLI.

The subcommand prints the datastore type, the SQLite version, the database path,
the configuration file in use and row totals.
"""

from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace

from tabulate import tabulate

from litesync.cli.commands.command_entry_point import CommandEntryPoint
from litesync.cli.utils import open_datastore
from litesync.config.configfile import default_config_info


class DatabaseInfoCommand(CommandEntryPoint):
    """
    Handles the `database info` subcommand, which prints summary details
    about the database.

    Methods:
        add_parser: Adds the `database info` command to the CLI parser.
        process_command: Prints the summary to the console.
    """

    def add_parser(self, database_commands: ArgumentParser):  # pylint: disable=arguments-renamed
        """
        Add the `database info` subcommand parser to the CLI argument parser.

        Parameters:
            database_commands (ArgumentParser): The subparsers object to which the `database info`
                subcommand parser will be added.
        """
        parser = database_commands.add_parser(
            "info",
            help="Print information about the database.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        parser.set_defaults(func=self.process_command)

    def process_command(self, args: Namespace):
        """
        Print information about the database to the console.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        with open_datastore(args.db) as datastore:
            entities = datastore.scan_sync_entities()
            tag_items = datastore.scan_tag_items()
            summary = [
                ("Datastore", datastore.get_name()),
                ("SQLite Version", datastore.get_version()),
                ("Path", datastore.connection.db_path),
                ("Config File", default_config_info()["config_file"] or "None (defaults)"),
                ("Clients", len({entity.client_id for entity in entities})),
                ("Sync Entities", len(entities)),
                ("Tombstones", sum(1 for entity in entities if entity.deleted)),
                ("Tag Items", len(tag_items)),
            ]

        print(tabulate(summary, tablefmt="presto"))
