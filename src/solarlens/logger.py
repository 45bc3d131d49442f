"""Package logger for solarlens.

Messages go to stderr with the source location, e.g.::

    [solarlens] INFO 2026-01-01 12:00:00,000 [pipeline.py:detect:142] ...

Jitted code never logs; the pipeline logs between stages.
"""

import logging

logger = logging.getLogger("solarlens")
logger.setLevel(logging.INFO)

_handler = logging.StreamHandler()
_handler.setFormatter(
    logging.Formatter(
        "[solarlens] %(levelname)s %(asctime)s "
        "[%(filename)s:%(funcName)s:%(lineno)d] %(message)s"
    )
)
logger.addHandler(_handler)
logger.propagate = False


def set_level(level):
    """Set the verbosity of solarlens, e.g. ``set_level("DEBUG")``.

    Args:
        level (int or str):
            A logging level number or name.

    Raises:
        ValueError:
            If ``level`` is not a known level name.
    """
    if isinstance(level, str):
        name = level.upper()
        if name not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown logging level {level!r}")
        level = logging.getLevelNamesMapping()[name]
    logger.setLevel(level)
