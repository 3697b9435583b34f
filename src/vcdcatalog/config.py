from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .env import vcd_environment

APP = "vcdcatalog"

logger = logging.getLogger(__name__)


def config_dir() -> Path:
    """
    Cross-platform config directory:
      - Windows: %APPDATA%\\vcdcatalog
      - macOS/Linux: $XDG_CONFIG_HOME/vcdcatalog or ~/.config/vcdcatalog
    """
    if os.name == "nt":
        base = os.environ.get("APPDATA") or str(Path.home())
        return Path(base) / APP
    return Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))) / APP


def config_path() -> Path:
    return config_dir() / "config.json"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    api_version: str = "5.5"
    verify_ssl: bool = True
    timeout_s: int = 30
    # Re-fetch attempts after a mutation; 1 means read once, no polling.
    refetch_attempts: int = 1
    refetch_delay_s: float = 2.0

    @staticmethod
    def load(path: Optional[Path] = None) -> "Settings":
        path = path or config_path()

        # Priority: config dir .env < current dir .env < existing env vars
        env = vcd_environment(config_dir())

        data: dict = {}
        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable config %s: %s", path, e)
                data = {}

        s = Settings(
            api_version=str(data.get("api_version", Settings.api_version)),
            verify_ssl=bool(data.get("verify_ssl", Settings.verify_ssl)),
            timeout_s=int(data.get("timeout_s", Settings.timeout_s)),
            refetch_attempts=int(data.get("refetch_attempts", Settings.refetch_attempts)),
            refetch_delay_s=float(data.get("refetch_delay_s", Settings.refetch_delay_s)),
        )

        # Environment overrides (highest priority)
        s.api_version = env.get("VCD_API_VERSION", s.api_version)
        if "VCD_VERIFY_SSL" in env:
            s.verify_ssl = _as_bool(env["VCD_VERIFY_SSL"])
        s.timeout_s = int(env.get("VCD_TIMEOUT_S", s.timeout_s))
        s.refetch_attempts = int(env.get("VCD_REFETCH_ATTEMPTS", s.refetch_attempts))
        s.refetch_delay_s = float(env.get("VCD_REFETCH_DELAY_S", s.refetch_delay_s))

        s.refetch_attempts = max(1, s.refetch_attempts)
        return s

    def save(self, path: Optional[Path] = None) -> Path:
        path = path or config_path()
        path.parent.mkdir(parents=True, exist_ok=True)

        payload = {
            "api_version": self.api_version,
            "verify_ssl": self.verify_ssl,
            "timeout_s": self.timeout_s,
            "refetch_attempts": self.refetch_attempts,
            "refetch_delay_s": self.refetch_delay_s,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path
