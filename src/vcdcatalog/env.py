"""VCD_* settings from .env files and the process environment.

Nothing here writes to os.environ; callers get a merged dict back.
Priority order (highest to lowest):
1. VCD_* variables already in the environment
2. .env in current working directory
3. .env in config directory (~/.config/vcdcatalog/.env)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

PREFIX = "VCD_"


def parse_env_file(path: Path, prefix: str = PREFIX) -> Dict[str, str]:
    """Return the `prefix`-ed KEY=value pairs of a .env file.

    Comments, blank lines, quoted values and `export KEY=value` are handled;
    keys without the prefix are skipped.
    """
    result: Dict[str, str] = {}

    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        return result

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[7:].strip()

        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key.startswith(prefix):
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        result[key] = value

    return result


def vcd_environment(config_dir: Path, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Merge VCD_* values from .env files with the live environment."""
    environ = os.environ if environ is None else environ

    merged: Dict[str, str] = {}
    for env_file in (config_dir / ".env", Path.cwd() / ".env"):
        merged.update(parse_env_file(env_file))
    merged.update({k: v for k, v in environ.items() if k.startswith(PREFIX)})
    return merged
