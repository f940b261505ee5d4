"""Logging utilities.

Key goal:
- Each request step logs clearly so a CloudWatch reader can locate failures quickly.
- Keep logging config minimal; the Lambda runtime may already own the root logger.
"""
from __future__ import annotations

import logging
import os

_DEFAULT_LEVEL = os.environ.get("FISCAI_LOG_LEVEL", "INFO").upper()

def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # If already configured elsewhere, do not attach handlers again.
    if logger.handlers:
        return logger

    logger.setLevel(_DEFAULT_LEVEL)

    h = logging.StreamHandler()
    fmt = logging.Formatter("[%(levelname)s] %(name)s:%(lineno)d - %(message)s")
    h.setFormatter(fmt)
    logger.addHandler(h)
    logger.propagate = False

    return logger

def log_step(logger: logging.Logger, step: str, msg: str, *args):
    # msg takes %-style args like logger.info; the step prefix is fixed
    logger.info("[STEP %s] %s", step, msg % args if args else msg)
