"""Runtime settings resolved from the environment.

Decisions:
- Priority: real env var > project .env file > default (same order as the
  palette in theme.py).
- The .env file sits next to src/ and only WORKSUITE_* keys are read from it.
- Paths are resolved relative to the current working directory, so the
  default store is ./data/db.json wherever the dashboard is launched.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

ENV_FILE = Path(__file__).resolve().parent.parent / '.env'

DEFAULT_DB_PATH = Path('data') / 'db.json'
DEFAULT_TICK_MS = 200


def truthy(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def read_env_file(path: Path = ENV_FILE) -> Dict[str, str]:
    """Return WORKSUITE_* assignments from a KEY=VALUE file (missing file -> {})."""
    values: Dict[str, str] = {}
    if not path.is_file():
        return values
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        if k.startswith('WORKSUITE_'):
            values[k] = v.strip().strip('"').strip("'")
    return values


@dataclass
class Settings:
    db_path: Path = DEFAULT_DB_PATH
    tick_ms: int = DEFAULT_TICK_MS
    log_file: Optional[Path] = None
    alt_screen: bool = True
    keep_going: bool = False

    @property
    def tick_rate(self) -> float:
        """Tick interval in seconds."""
        return self.tick_ms / 1000.0

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None,
             env_file: Path = ENV_FILE) -> "Settings":
        env = os.environ if environ is None else environ
        file_values = read_env_file(env_file)

        def get(key: str) -> Optional[str]:
            value = env.get(key)
            if value is None:
                value = file_values.get(key)
            return value

        tick_raw = get('WORKSUITE_TICK_MS')
        try:
            tick_ms = int(tick_raw) if tick_raw else DEFAULT_TICK_MS
        except ValueError:
            raise ValueError(f"WORKSUITE_TICK_MS must be an integer, got {tick_raw!r}") from None
        if tick_ms <= 0:
            raise ValueError(f"WORKSUITE_TICK_MS must be positive, got {tick_ms}")
        log_raw = get('WORKSUITE_LOG_FILE')
        return cls(
            db_path=Path(get('WORKSUITE_DB') or DEFAULT_DB_PATH),
            tick_ms=tick_ms,
            log_file=Path(log_raw) if log_raw else None,
            alt_screen=truthy(get('WORKSUITE_ALT_SCREEN'), True),
            keep_going=truthy(get('WORKSUITE_KEEP_GOING'), False),
        )
