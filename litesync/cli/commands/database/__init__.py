##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
CLI command package for interacting with the litesync database.

This package defines the `database` command group of the litesync CLI, used to
create the schema and to inspect or clear the data of a sync client.

Modules:
    database: Entry point for the `database` command group. Registers every subcommand.
    init: Defines the `database init` subcommand, which creates the schema.
    info: Defines the `database info` subcommand, which summarizes the database.
    count: Defines the `database count` subcommand, which prints the item count of a client.
    get: Defines the `database get` subcommand, which tabulates the rows of a client.
    clear: Defines the `database clear` subcommand, which tombstones the data of a client.
"""

from litesync.cli.commands.database.database import DatabaseCommand


__all__ = ["DatabaseCommand"]
