"""Application-wide logging utilities.

Every module logs through the `uvicorn.error` logger (directly, or through
the shared `logger` below) so messages land in the server output next to
uvicorn's own lines.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("uvicorn.error")


def configure_logging(debug: bool) -> None:
    """Set the shared logger level for the running process.

    Args:
        debug: When True, emit DEBUG records (prompt sizes, store filters).
    """

    logger.setLevel(logging.DEBUG if debug else logging.INFO)
