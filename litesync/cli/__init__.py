##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
litesync CLI Package.

This package defines the `litesync` command-line interface, used to create and
inspect the SQLite database of a sync server.

Subpackages:
    commands: Contains all command implementations for the litesync CLI.

Modules:
    argparse_main: Sets up the top-level argument parser and registers every command.
    utils: Provides helpers shared by the CLI commands.
"""
