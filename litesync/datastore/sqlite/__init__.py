##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
SQLite-based datastore for the litesync application.

All sync entities live in one table, `sync_entities`. Tag uniqueness is enforced
with shadow rows in the same table plus a partial unique index, and updates are
conditional on the stored version.

Modules:
    conflicts: Tells uniqueness collisions apart from other SQLite failures.
    shadow_tags: Reads and writes the rows that reserve client and server tags.
    sqlite_connection: Provides the shared SQLite handle and its transaction helper.
    sqlite_datastore: Implements the `Datastore` interface using SQLite.
"""
