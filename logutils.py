# SPDX-License-Identifier: GPL-3.0-only

import os
import logging
from typing import Optional

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, LOG_LEVEL, None)

if not isinstance(numeric_level, int):
    raise ValueError(f"Invalid log level: {LOG_LEVEL}")

logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# urllib3 logs every connection at DEBUG, including the provider host
logging.getLogger("urllib3").setLevel(max(numeric_level, logging.INFO))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Retrieves a logger instance for a relay module.

    Args:
        name (str, optional): Usually the caller's ``__name__``. If None, the
            root logger is returned.

    Returns:
        logging.Logger: A logger sharing the process-wide configuration.
    """
    return logging.getLogger(name)
