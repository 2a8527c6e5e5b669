##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Merlin
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Merlin.
##############################################################################

"""
Main entry point into litesync's codebase.
"""

import logging
import sys
import traceback

from litesync.cli.argparse_main import build_main_parser
from litesync.config import configfile
from litesync.log_formatter import setup_logging
from litesync.utils import get_yaml_var


LOG = logging.getLogger("litesync")


def main():
    """
    Entry point for the litesync command-line interface (CLI) operations.

    Sets up the argument parser and logging, then runs the function attached to
    the chosen command. Any exception is logged and turned into exit code 1.
    """
    parser = build_main_parser()
    if len(sys.argv) == 1:
        parser.print_help(sys.stdout)
        return 1
    args = parser.parse_args()

    log_level = args.level or get_yaml_var(configfile.CONFIG.logging, "level", "INFO")
    colors = get_yaml_var(configfile.CONFIG.logging, "colors", True)
    setup_logging(logger=LOG, log_level=str(log_level).upper(), colors=colors)

    try:
        args.func(args)
        # Top of the program stack, so catching everything here is intended
    except Exception as excpt:  # pylint: disable=broad-except
        LOG.debug(traceback.format_exc())
        LOG.error(str(excpt))
        sys.exit(1)

    sys.exit()


if __name__ == "__main__":
    main()
