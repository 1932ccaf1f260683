# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging utilities for tablemap.

The library never configures handlers, levels or formats. Applications do
that once via ``logging.basicConfig()`` (or their own setup) in the entry
point, so loggers returned here stay free of duplicate handlers.

Example:
    Typical usage in a module::

        from tablemap.logger import get_logger

        logger = get_logger("tablemap.adapters")
        logger.debug("Connection acquired")
"""

import logging


def get_logger(name: str = "tablemap") -> logging.Logger:
    """Retrieve a logger instance.

    Args:
        name: The logger name. Defaults to "tablemap".

    Returns:
        A ``logging.Logger`` instance bound to the given name.
    """
    return logging.getLogger(name)
