import logging
import os
import sys


def setup_logging(level="WARNING", verbose=False):
    """
    Logging for the command line.
    - NETPROBE_LOG_LEVEL wins over `level`; --verbose means INFO
    - logs go to stderr so the report on stdout stays clean
    - doesn't reconfigure if handlers already exist
    """
    root = logging.getLogger()
    if root.handlers:
        return

    if verbose:
        level = "INFO"
    level_name = os.environ.get("NETPROBE_LOG_LEVEL", level).upper()
    level_value = getattr(logging, level_name, logging.WARNING)

    logging.basicConfig(
        level=level_value,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
