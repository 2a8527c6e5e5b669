##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
litesync CLI Commands Package.

Each module encapsulates the logic and argument parsing for a distinct litesync
command, built around the `CommandEntryPoint` interface.

Subpackages:
    database: Implements the `database` command group for creating and inspecting the database.

Modules:
    command_entry_point: Defines the abstract base class `CommandEntryPoint` for all CLI commands.
"""

from litesync.cli.commands.database import DatabaseCommand


# Keep these in alphabetical order
ALL_COMMANDS = [
    DatabaseCommand(),
]
