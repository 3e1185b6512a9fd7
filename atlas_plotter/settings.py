"""Editor settings read from the environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .command_manager import DEFAULT_MAX_HISTORY

logger = logging.getLogger(__name__)

DEFAULT_DEBUG_LOG = "atlas_plotter_debug.log"
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EditorSettings:
    max_history: int = DEFAULT_MAX_HISTORY
    seed_default_sprite: bool = True
    debug: bool = False
    debug_log: str = DEFAULT_DEBUG_LOG

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EditorSettings":
        env = os.environ if environ is None else environ
        max_history = DEFAULT_MAX_HISTORY
        raw_history = env.get("ATLASPLOTTER_MAX_HISTORY", "").strip()
        if raw_history:
            try:
                max_history = int(raw_history)
            except ValueError:
                logger.warning("Ignoring ATLASPLOTTER_MAX_HISTORY=%r, expected an integer", raw_history)
            else:
                if max_history < 1:
                    logger.warning("Ignoring ATLASPLOTTER_MAX_HISTORY=%s, must be at least 1", max_history)
                    max_history = DEFAULT_MAX_HISTORY
        seed_raw = env.get("ATLASPLOTTER_SEED_DEFAULT")
        seed_default = True if seed_raw is None else seed_raw.strip().lower() in _TRUTHY
        return cls(
            max_history=max_history,
            seed_default_sprite=seed_default,
            debug=bool(env.get("ATLASPLOTTER_DEBUG")),
            debug_log=env.get("ATLASPLOTTER_DEBUG_LOG", DEFAULT_DEBUG_LOG) or DEFAULT_DEBUG_LOG,
        )
