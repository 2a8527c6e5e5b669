##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
litesync: a SQLite storage backend for browser-sync servers.

This module contains the source code for litesync.
"""

__version__ = "0.3.0"
VERSION = __version__
