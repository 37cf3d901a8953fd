"""Runtime settings and logging setup for the bahr checker."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

_LOGGER_NAME = "bahr"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger under the bahr hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.propagate = False

    # Reset handlers so a reloaded app does not print every record twice
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[bahr] %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"
    max_input_chars: int = 20000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("HOST", cls.host),
            port=int(env.get("PORT", cls.port)),
            debug=_env_bool(env.get("FLASK_DEBUG"), cls.debug),
            log_level=env.get("BAHR_LOG_LEVEL", cls.log_level),
            max_input_chars=int(env.get("BAHR_MAX_INPUT_CHARS", cls.max_input_chars)),
        )
