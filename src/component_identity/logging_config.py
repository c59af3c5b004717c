"""
Logging for component identity resolution.

Everything logs below the ``component_identity`` logger. The library never
touches the root logger: :func:`setup_logging` only installs handlers on the
package logger, so host applications keep their own logging setup.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER = "component_identity"

_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

# Marks handlers installed by setup_logging so a second call replaces them.
_OWNED = "_component_identity_handler"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Route package log records to stderr through rich, and optionally a file.

    Args:
        verbosity: ``quiet`` (errors only), ``normal`` (warnings) or
                   ``verbose`` (debug, with source paths)
        log_file: Optional file that receives the same records, appended

    Returns:
        The ``component_identity`` logger
    """
    if verbosity not in _LEVELS:
        raise ValueError(f"Unknown verbosity {verbosity!r}")
    level = _LEVELS[verbosity]
    verbose = verbosity == "verbose"

    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_path=verbose,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _OWNED, True)
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return ``component_identity`` or a logger below it.

    Module names outside the package (``resolver``) are nested under it
    (``component_identity.resolver``).
    """
    if name is None:
        return logging.getLogger(_ROOT_LOGGER)

    if not name.startswith(_ROOT_LOGGER):
        name = f"{_ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
