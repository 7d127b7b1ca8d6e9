"""
DMN Runtime - Logging setup

Library modules only create module loggers; the root handler is installed
here when the embedding application asks for it.
"""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO", fmt: Optional[str] = None) -> logging.Logger:
    """Install a stream handler on the root logger and set the level."""
    root = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    
    root.setLevel(numeric_level)
    
    # Replace handlers installed by a previous call
    for handler in list(root.handlers):
        if getattr(handler, "_dmn_runtime", False):
            root.removeHandler(handler)
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler._dmn_runtime = True
    root.addHandler(handler)
    
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    
    return root
