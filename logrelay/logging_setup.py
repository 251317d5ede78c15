# logrelay/logging_setup.py
import logging
from typing import Dict, Optional, Tuple

from logrelay.config import DEFAULT_LOG_FILTER

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"

# Quiet down very chatty libraries unless a directive asks for them
QUIET_LOGGERS = ("httpx", "httpcore")

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "off": logging.CRITICAL + 10,
}


def _level(name: str) -> int:
    try:
        return _LEVELS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {name!r}") from None


def parse_log_filter(spec: str) -> Tuple[Optional[int], Dict[str, int]]:
    """
    Parse a directive list such as "logrelay=debug,uvicorn=warning,info".

    A bare level sets the root level; "target=level" sets a named logger.
    Returns (root_level or None, {logger_name: level}).
    """
    root_level: Optional[int] = None
    targets: Dict[str, int] = {}

    for directive in spec.split(","):
        directive = directive.strip()
        if not directive:
            continue
        if "=" in directive:
            target, level = directive.split("=", 1)
            target = target.strip()
            if not target:
                raise ValueError(f"Empty logger name in directive: {directive!r}")
            targets[target] = _level(level)
        else:
            root_level = _level(directive)

    return root_level, targets


def configure_logging(filter_spec: str = DEFAULT_LOG_FILTER) -> None:
    invalid: Optional[str] = None
    try:
        root_level, targets = parse_log_filter(filter_spec)
    except ValueError as e:
        invalid = str(e)
        root_level, targets = parse_log_filter(DEFAULT_LOG_FILTER)

    logging.basicConfig(format=LOG_FORMAT)
    # basicConfig is a no-op once handlers exist, so set the level directly
    logging.getLogger().setLevel(root_level if root_level is not None else logging.INFO)

    for name in QUIET_LOGGERS:
        if name not in targets:
            logging.getLogger(name).setLevel(logging.WARNING)

    for name, level in targets.items():
        logging.getLogger(name).setLevel(level)

    if invalid:
        logging.getLogger("logrelay").warning(
            "invalid_log_filter filter=%r error=%s fallback=%r",
            filter_spec,
            invalid,
            DEFAULT_LOG_FILTER,
        )
