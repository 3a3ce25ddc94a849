"""Logging setup for applications embedding edgewise."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(verbose: bool = False, config_level: str | None = None) -> int:
    if verbose:
        return logging.DEBUG
    if config_level:
        return getattr(logging, config_level.upper(), logging.INFO)
    return logging.INFO


def setup_logging(verbose: bool = False, config_level: str | None = None) -> None:
    logging.basicConfig(
        level=resolve_level(verbose, config_level),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
