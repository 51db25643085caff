"""Logging setup for the ``ffl_standings`` logger hierarchy.

Every module logs through ``logging.getLogger(__name__)``, so all output
hangs off the ``ffl_standings`` logger.  Library callers can leave it alone
and let records propagate to their own handlers; the CLI calls
:func:`configure_logging` once to pick one of four verbosities:

* ``quiet``: warnings only, such as a projection falling back to
  extrapolation.
* ``normal``: one line per loaded file and computed table.
* ``verbose``: adds per-division detail (custom level 15).
* ``debug``: also reports every skipped game-log record.

Without an explicit level the ``FFL_STANDINGS_LOG_LEVEL`` environment
variable is read, then ``normal`` is assumed::

    >>> from ffl_standings.utils.logger import configure_logging, get_logger
    >>> configure_logging("verbose")
    >>> get_logger("standings.engine").info("Computing standings for %d", 2023)
"""

from __future__ import annotations

import logging
import os
import sys

VERBOSE: int = 15
logging.addLevelName(VERBOSE, "VERBOSE")

QUIET: int = logging.WARNING
NORMAL: int = logging.INFO
DEBUG: int = logging.DEBUG

PACKAGE_LOGGER: str = "ffl_standings"
LEVEL_ENV_VAR: str = "FFL_STANDINGS_LOG_LEVEL"

_LEVELS: dict[str, int] = {"quiet": QUIET, "normal": NORMAL, "verbose": VERBOSE, "debug": DEBUG}
_FORMAT: str = "%(asctime)s | %(name)s | %(levelname)-8s | %(message)s"


def resolve_level(level: str | None = None) -> int:
    """Translate a verbosity name into a numeric logging level.

    Args:
        level: ``quiet``, ``normal``, ``verbose`` or ``debug`` in any case.
            ``None`` defers to ``FFL_STANDINGS_LOG_LEVEL``, then ``normal``.

    Raises:
        ValueError: If the name is not one of the four verbosities.
    """
    name = level if level is not None else os.environ.get(LEVEL_ENV_VAR, "normal")
    try:
        return _LEVELS[name.strip().lower()]
    except KeyError:
        choices = ", ".join(_LEVELS)
        msg = f"Unknown log level {name!r}; choose one of {choices}"
        raise ValueError(msg) from None


def configure_logging(level: str | None = None) -> None:
    """Send ``ffl_standings`` records at *level* and above to stderr.

    Any handler installed by an earlier call is replaced, and records stop
    propagating to the root logger so they are not printed twice.

    Raises:
        ValueError: See :func:`resolve_level`.
    """
    numeric = resolve_level(level)
    package = logging.getLogger(PACKAGE_LOGGER)
    for old in list(package.handlers):
        package.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    package.addHandler(handler)
    package.setLevel(numeric)
    package.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return the ``ffl_standings.<name>`` logger (e.g. ``get_logger("cli")``)."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
