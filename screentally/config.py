"""Central configuration for screentally."""

import os
from pathlib import Path

# ── Paths ──────────────────────────────────────────────────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Load .env from project root
_env_path = _PROJECT_ROOT / ".env"
if _env_path.exists():
    for _line in _env_path.read_text().splitlines():
        _line = _line.strip()
        if _line and not _line.startswith("#") and "=" in _line:
            _k, _, _v = _line.partition("=")
            os.environ.setdefault(_k.strip(), _v.strip())


def _default_data_dir() -> Path:
    env = os.environ.get("SCREENTALLY_DATA_DIR")
    if env:
        return Path(env)
    if (_PROJECT_ROOT / "pyproject.toml").exists():
        return _PROJECT_ROOT / "data"
    return Path.home() / ".screentally"


DATA_DIR = _default_data_dir()
DB_PATH = DATA_DIR / "screentally.db"
LOG_PATH = DATA_DIR / "screentally.log"

# ── Collection intervals (seconds) ────────────────────────────────────
SCREEN_INTERVAL = 2
FOREGROUND_INTERVAL = 2

# If elapsed time between polls exceeds interval * this factor, the machine slept
SLEEP_GAP_FACTOR = 6

# The screen collector records when it last saw the screen every this many
# seconds. A saved "interactive" state older than STALE_STATE_AFTER at startup
# means the previous run died without closing its session.
STATE_CHECKPOINT_INTERVAL = 15
STALE_STATE_AFTER = 60

# ── Buffer ─────────────────────────────────────────────────────────────
BUFFER_FLUSH_INTERVAL = 5  # seconds between flushes
BUFFER_MAX_SIZE = 500       # force flush if buffer exceeds this

# ── Report policy ──────────────────────────────────────────────────────
UNLOCK_DEBOUNCE_MS = 3000   # interactive events closer than this are one unlock
TOP_APPS_LIMIT = 3
PARALLEL_REDUCERS = os.environ.get("SCREENTALLY_PARALLEL", "") == "1"

# ── Foreground noise ──────────────────────────────────────────────────
FOREGROUND_EXCLUDED = frozenset({
    "com.apple.loginwindow",
    "com.apple.ScreenSaver.Engine",
    "com.apple.dock",
})
