"""
Logging configuration for the command line
"""

import logging
from pathlib import Path


def setup_logging(log_file: Path | None = None, verbose: bool = False):
    """Setup logging with transport logs suppressed to WARNING"""
    logging.getLogger("curl_cffi").setLevel(logging.WARNING)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    rbxauth_logger = logging.getLogger("rbxauth")
    rbxauth_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # The prompt and error console own stderr unless verbose
    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(formatter)
        rbxauth_logger.addHandler(console_handler)
    else:
        rbxauth_logger.addHandler(logging.NullHandler())
    rbxauth_logger.propagate = False

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        rbxauth_logger.addHandler(file_handler)
