from __future__ import annotations

import logging


def report(logger: logging.Logger, message: str, verbose: bool) -> None:
    """Trace a diagnostic line: INFO when the caller asked for verbosity, DEBUG otherwise."""
    if verbose:
        logger.info(message)
    else:
        logger.debug(message)
