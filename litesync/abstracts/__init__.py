##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
The `abstracts` package provides ABC classes that can be used throughout
litesync's codebase.

Modules:
    factory: Contains `LitesyncBaseFactory`, used to manage pluggable components in litesync.
"""

from litesync.abstracts.factory import LitesyncBaseFactory


__all__ = ["LitesyncBaseFactory"]
