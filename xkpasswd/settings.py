"""
Process-level settings for the generator and the logging setup that goes
with them.

Values can be overridden from the environment, e.g.
XKPASSWD_ENTROPY_MIN_SEEN=60 or XKPASSWD_ENTROPY_WARNINGS=BLIND.
"""

from __future__ import annotations

import sys
from typing import Literal

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


EntropyWarningLevel = Literal["ALL", "BLIND", "SEEN", "NONE"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="XKPASSWD_", extra="ignore")

    # 78 bits is roughly 12 random characters of mixed case, digits & symbols
    entropy_min_blind: int = Field(default=78, gt=0)
    # 52 bits is roughly 8 such characters
    entropy_min_seen: int = Field(default=52, gt=0)
    entropy_warnings: EntropyWarningLevel = "ALL"
    debug: bool = False
    log_level: str = "WARNING"

    @property
    def warn_blind(self) -> bool:
        return self.entropy_warnings in ("ALL", "BLIND")

    @property
    def warn_seen(self) -> bool:
        return self.entropy_warnings in ("ALL", "SEEN")


def configure_logging(settings: Settings) -> None:
    """
    Replace loguru's default sink with a single stderr sink and turn on
    logging for this package.

    Debug mode always logs at DEBUG, otherwise `settings.log_level` applies.
    """
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<level>{level: <8}</level> | {message}",
        backtrace=settings.debug,
        diagnose=False,
    )
    logger.enable("xkpasswd")
