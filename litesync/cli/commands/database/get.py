##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Implements the `database get` subcommand for the litesync CLI.

The subcommand prints the sync entities of a client as a table and, on request,
the tag items that reserve its client and server tags.
"""

import logging
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace
from typing import List

from tabulate import tabulate

from litesync.cli.commands.command_entry_point import CommandEntryPoint
from litesync.cli.utils import open_datastore
from litesync.datastore.data_models import SyncEntity


LOG = logging.getLogger(__name__)

ENTITY_HEADERS = [
    "id",
    "version",
    "mtime",
    "data_type",
    "name",
    "deleted",
    "folder",
    "client_defined_unique_tag",
    "server_defined_unique_tag",
]
TAG_HEADERS = ["id", "mtime", "ctime"]


class DatabaseGetCommand(CommandEntryPoint):
    """
    Handles the `database get` subcommand, which tabulates the rows of a client.

    Methods:
        add_parser: Adds the `database get` command to the CLI parser.
        process_command: Prints the entities (and optionally tag items) of a client.
    """

    def add_parser(self, database_commands: ArgumentParser):  # pylint: disable=arguments-renamed
        """
        Add the `database get` subcommand parser to the CLI argument parser.

        Parameters:
            database_commands (ArgumentParser): The subparsers object to which the `database get`
                subcommand parser will be added.
        """
        parser = database_commands.add_parser(
            "get",
            help="Print the sync entities stored for a client.",
            formatter_class=ArgumentDefaultsHelpFormatter,
        )
        parser.set_defaults(func=self.process_command)
        parser.add_argument("client_id", type=str, help="The ID of the client.")
        parser.add_argument(
            "--include-tags",
            action="store_true",
            help="Also print the tag items reserving the client's unique tags.",
        )

    @staticmethod
    def _entity_rows(entities: List[SyncEntity]) -> List[List]:
        """
        Pick the displayed columns of each entity.

        Args:
            entities: The entities to display.

        Returns:
            One row of values per entity, in `ENTITY_HEADERS` order.
        """
        return [[getattr(entity, header) for header in ENTITY_HEADERS] for entity in entities]

    def process_command(self, args: Namespace):
        """
        Print the rows of a client to the console.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        with open_datastore(args.db) as datastore:
            entities = datastore.scan_sync_entities(args.client_id)
            tag_items = datastore.scan_tag_items(args.client_id) if args.include_tags else []

        if entities:
            print(tabulate(self._entity_rows(entities), headers=ENTITY_HEADERS))
        else:
            LOG.info(f"No sync entities found for client '{args.client_id}'.")

        if args.include_tags:
            if tag_items:
                print()
                print(tabulate([[item.id, item.mtime, item.ctime] for item in tag_items], headers=TAG_HEADERS))
            else:
                LOG.info(f"No tag items found for client '{args.client_id}'.")
