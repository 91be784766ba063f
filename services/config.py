# services/config.py
"""
Runtime settings read from the environment.

PIXELPAL_DATA_DIR    where the three save files live (default: app data dir)
PIXELPAL_TIME_SCALE  > 1 runs every simulation timer faster (debug aid)
PIXELPAL_LOG_LEVEL   logging level name, e.g. DEBUG
PIXELPAL_SEED        integer seed for the reward-event RNG
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class AppConfig:
    data_dir: Optional[str] = None
    time_scale: float = 1.0
    log_level: str = "INFO"
    seed: Optional[int] = None

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Build a config from environment variables; bad values keep defaults."""
        env = os.environ if env is None else env
        defaults = AppConfig()

        data_dir = env.get("PIXELPAL_DATA_DIR") or None

        time_scale = defaults.time_scale
        raw = env.get("PIXELPAL_TIME_SCALE")
        if raw:
            try:
                time_scale = float(raw)
                if time_scale <= 0:
                    raise ValueError(raw)
            except ValueError:
                logger.warning("PIXELPAL_TIME_SCALE=%r is not a positive number; using 1.0", raw)
                time_scale = defaults.time_scale

        log_level = (env.get("PIXELPAL_LOG_LEVEL") or defaults.log_level).upper()
        if log_level not in _LEVELS:
            logger.warning("PIXELPAL_LOG_LEVEL=%r is not a level name; using INFO", log_level)
            log_level = defaults.log_level

        seed = defaults.seed
        raw = env.get("PIXELPAL_SEED")
        if raw:
            try:
                seed = int(raw)
            except ValueError:
                logger.warning("PIXELPAL_SEED=%r is not an integer; ignoring", raw)

        return AppConfig(data_dir=data_dir, time_scale=time_scale, log_level=log_level, seed=seed)
