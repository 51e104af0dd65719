import logging
import sys


logger = logging.getLogger("gitversioning")

_FORMAT = "%(message)s"
_DEBUG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(debug: bool):
    """
    Route gitversioning log records to stderr.

    stdout is reserved for command results. In debug mode records also carry
    their level and the module that emitted them.
    """
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    formatter = logging.Formatter(_DEBUG_FORMAT if debug else _FORMAT)

    # already configured, possibly by an earlier command in the same process
    if logger.handlers:
        for handler in logger.handlers:
            handler.setFormatter(formatter)
        return

    if logger.hasHandlers():
        # a parent logger (e.g. the root) already emits our records
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
